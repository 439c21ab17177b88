from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

from tasktrack.domain.tasks.ports import Clock


class SystemClock(Clock):
    """Wall clock in the user's timezone; its calendar date is what "today" means."""

    def __init__(self, tz_name: str) -> None:
        self._tz_name = tz_name
        self._tz = ZoneInfo(tz_name)

    @property
    def tz_name(self) -> str:
        return self._tz_name

    def now(self) -> datetime:
        return datetime.now(self._tz)
