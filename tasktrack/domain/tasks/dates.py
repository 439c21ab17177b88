"""
Due-date classification and time display helpers.

Everything here is a pure function of its arguments. "Today" is always
``now.date()``, i.e. the calendar date in whatever timezone ``now`` carries;
the system clock hands out datetimes in the configured user timezone.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional

from tasktrack.constants import (
    BUCKET_NONE,
    BUCKET_OVERDUE,
    BUCKET_TODAY,
    BUCKET_TOMORROW,
    BUCKET_UPCOMING,
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_LOW_WINDOW_DAYS,
    PRIORITY_MEDIUM,
    PRIORITY_NONE,
)
from tasktrack.domain.tasks.models import DueDateInfo, PriorityLevel


def days_until(due_date: date, today: date) -> int:
    """Whole calendar days from today to the due date (negative when past)."""
    return (due_date - today).days


def format_short_date(value: date, today: date) -> str:
    """'Oct 20', or 'Oct 20, 2025' when the year differs from today's."""
    text = f"{value.strftime('%b')} {value.day}"
    if value.year != today.year:
        text += f", {value.year}"
    return text


def classify_due_date(due_date: Optional[date], now: datetime, completed: bool) -> DueDateInfo:
    """
    Put a due date into a display bucket.

    Rules:
    - no due date -> none
    - today / tomorrow -> today / tomorrow (regardless of completion)
    - in the past and still open -> overdue
    - anything else, including past dates of completed tasks -> upcoming
    """
    if due_date is None:
        return DueDateInfo(bucket=BUCKET_NONE, display_text="")

    today = now.date()
    if due_date == today:
        return DueDateInfo(bucket=BUCKET_TODAY, display_text="Today")
    if due_date == today + timedelta(days=1):
        return DueDateInfo(bucket=BUCKET_TOMORROW, display_text="Tomorrow")

    text = format_short_date(due_date, today)
    if due_date < today and not completed:
        return DueDateInfo(bucket=BUCKET_OVERDUE, display_text=text)
    return DueDateInfo(bucket=BUCKET_UPCOMING, display_text=text)


def priority_level(due_date: Optional[date], now: datetime, completed: bool) -> PriorityLevel:
    if due_date is None or completed:
        return PRIORITY_NONE

    diff = days_until(due_date, now.date())
    if diff < 0:
        return PRIORITY_HIGH
    if diff == 0:
        return PRIORITY_MEDIUM
    if diff <= PRIORITY_LOW_WINDOW_DAYS:
        return PRIORITY_LOW
    return PRIORITY_NONE


def relative_age(timestamp: datetime, now: datetime) -> str:
    seconds = int((now - timestamp).total_seconds())
    # clock skew can put the timestamp slightly in the future
    if seconds < 60:
        return "just now"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    days = hours // 24
    if days < 7:
        return f"{days}d ago"
    weeks = days // 7
    if weeks < 4:
        return f"{weeks}w ago"
    return f"{days // 30}mo ago"
