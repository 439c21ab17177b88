"""
Constants for storage, view modes and due-date buckets.
"""
from __future__ import annotations

# Key under which the whole collection is stored in the key-value store
STORAGE_KEY = "todos"

# Filter modes (ViewState.filter_mode)
FILTER_ALL = "all"
FILTER_ACTIVE = "active"
FILTER_COMPLETED = "completed"
FILTER_DUE_TODAY = "due-today"
FILTER_OVERDUE = "overdue"
FILTER_MODES = (FILTER_ALL, FILTER_ACTIVE, FILTER_COMPLETED, FILTER_DUE_TODAY, FILTER_OVERDUE)

# Sort modes (ViewState.sort_mode)
SORT_DEFAULT = "default"  # latest modified first
SORT_DATE_ASC = "date-asc"
SORT_DATE_DESC = "date-desc"
SORT_ALPHA_ASC = "alpha-asc"
SORT_ALPHA_DESC = "alpha-desc"
SORT_CREATED_NEWEST = "created-newest"
SORT_CREATED_OLDEST = "created-oldest"
SORT_MODES = (
    SORT_DEFAULT,
    SORT_DATE_ASC,
    SORT_DATE_DESC,
    SORT_ALPHA_ASC,
    SORT_ALPHA_DESC,
    SORT_CREATED_NEWEST,
    SORT_CREATED_OLDEST,
)

# Due-date display buckets
BUCKET_NONE = "none"
BUCKET_TODAY = "today"
BUCKET_TOMORROW = "tomorrow"
BUCKET_OVERDUE = "overdue"
BUCKET_UPCOMING = "upcoming"

# Priority levels derived from due-date proximity
PRIORITY_NONE = "none"
PRIORITY_LOW = "low"
PRIORITY_MEDIUM = "medium"
PRIORITY_HIGH = "high"

# Tasks due within this many calendar days (inclusive) count as low priority
PRIORITY_LOW_WINDOW_DAYS = 2
