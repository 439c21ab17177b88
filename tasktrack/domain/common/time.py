from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional, Union

from tasktrack.domain.common.errors import ValidationError


def ensure_aware(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        raise ValueError("datetime must be timezone-aware")
    return dt


def to_iso(dt: datetime) -> str:
    ensure_aware(dt)
    # store as ISO 8601 with offset
    return dt.isoformat()


def from_iso(s: str) -> datetime:
    """Parse a stored timestamp. Naive values (and a trailing 'Z') are read as UTC."""
    dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def parse_due_date(value: Union[None, str, date]) -> Optional[date]:
    """
    Normalize a due date coming from the outside world.

    Accepts None / "" (no deadline), a date, or a YYYY-MM-DD string.
    A datetime is rejected: due dates carry no time component.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        raise ValidationError("Due date must be a calendar date without a time.")
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        try:
            return date.fromisoformat(raw)
        except ValueError:
            raise ValidationError(f"Invalid due date: {value!r} (expected YYYY-MM-DD).") from None
    raise ValidationError(f"Invalid due date type: {type(value).__name__}")
