from __future__ import annotations

from tasktrack.domain.tasks.ports import Clock, IdGenerator


class TimestampIdGenerator(IdGenerator):
    """Millisecond creation timestamps, bumped so they strictly increase."""

    def __init__(self, clock: Clock) -> None:
        self._clock = clock
        self._last = 0

    def new_id(self) -> int:
        candidate = int(self._clock.now().timestamp() * 1000)
        if candidate <= self._last:
            candidate = self._last + 1
        self._last = candidate
        return candidate
