from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Literal, Optional, Tuple

FilterMode = Literal["all", "active", "completed", "due-today", "overdue"]
SortMode = Literal[
    "default",
    "date-asc",
    "date-desc",
    "alpha-asc",
    "alpha-desc",
    "created-newest",
    "created-oldest",
]
Bucket = Literal["none", "today", "tomorrow", "overdue", "upcoming"]
PriorityLevel = Literal["none", "low", "medium", "high"]


@dataclass(frozen=True)
class TaskRecord:
    id: int
    text: str
    description: str
    due_date: Optional[date]
    completed: bool
    created_at: datetime
    last_modified: datetime
    completed_at: Optional[datetime] = None

    @property
    def has_description(self) -> bool:
        return bool(self.description)

    @property
    def was_modified(self) -> bool:
        return self.last_modified != self.created_at


@dataclass(frozen=True)
class DueDateInfo:
    bucket: Bucket
    display_text: str


@dataclass(frozen=True)
class ViewState:
    """Transient view parameters. Never persisted."""

    search_query: str = ""
    filter_mode: FilterMode = "all"
    sort_mode: SortMode = "default"
    editing_id: Optional[int] = None


@dataclass(frozen=True)
class TaskSummary:
    remaining: int
    completed: int
    total: int


@dataclass(frozen=True)
class TaskView:
    active: Tuple[TaskRecord, ...]
    completed: Tuple[TaskRecord, ...]
    summary: TaskSummary
