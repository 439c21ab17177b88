"""
Derived view over the task collection.

compute_view() is a pure function of (tasks, view state, today): search,
then mode filter, then a stable sort, then the active/completed split.
Summary counts always come from the unfiltered collection.
"""
from __future__ import annotations

import unicodedata
from datetime import date
from typing import Callable, Iterable, List, Sequence

from tasktrack.constants import (
    FILTER_ACTIVE,
    FILTER_ALL,
    FILTER_COMPLETED,
    FILTER_DUE_TODAY,
    FILTER_OVERDUE,
    SORT_ALPHA_ASC,
    SORT_ALPHA_DESC,
    SORT_CREATED_NEWEST,
    SORT_CREATED_OLDEST,
    SORT_DATE_ASC,
    SORT_DATE_DESC,
)
from tasktrack.domain.tasks.models import TaskRecord, TaskSummary, TaskView, ViewState
from tasktrack.domain.tasks.rules import validate_filter_mode, validate_sort_mode


def matches_search(task: TaskRecord, query: str) -> bool:
    if not query:
        return True
    needle = query.casefold()
    if needle in task.text.casefold():
        return True
    return bool(task.description) and needle in task.description.casefold()


def _is_overdue(task: TaskRecord, today: date) -> bool:
    return task.due_date is not None and task.due_date < today and not task.completed


_FILTERS: dict[str, Callable[[TaskRecord, date], bool]] = {
    FILTER_ALL: lambda task, today: True,
    FILTER_ACTIVE: lambda task, today: not task.completed,
    FILTER_COMPLETED: lambda task, today: task.completed,
    FILTER_DUE_TODAY: lambda task, today: task.due_date == today,
    FILTER_OVERDUE: _is_overdue,
}


def apply_filter(tasks: Iterable[TaskRecord], mode: str, today: date) -> List[TaskRecord]:
    validate_filter_mode(mode)
    keep = _FILTERS[mode]
    return [t for t in tasks if keep(t, today)]


def collation_key(text: str) -> tuple[str, str]:
    """
    Locale-style ordering key: case and accents are ignored first. Ties are
    broken on the case-swapped text so lowercase sorts before uppercase, and
    identical texts still compare equal.
    """
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (base.casefold(), text.swapcase())


def _sort_by_due_date(tasks: Sequence[TaskRecord], descending: bool) -> List[TaskRecord]:
    # tasks without a due date always go last, in their original order
    dated = [t for t in tasks if t.due_date is not None]
    undated = [t for t in tasks if t.due_date is None]
    dated.sort(key=lambda t: t.due_date, reverse=descending)
    return dated + undated


def sort_tasks(tasks: Sequence[TaskRecord], mode: str) -> List[TaskRecord]:
    """Stable sort; reverse=True keeps equal items in their original order too."""
    validate_sort_mode(mode)
    if mode == SORT_DATE_ASC:
        return _sort_by_due_date(tasks, descending=False)
    if mode == SORT_DATE_DESC:
        return _sort_by_due_date(tasks, descending=True)
    if mode == SORT_ALPHA_ASC:
        return sorted(tasks, key=lambda t: collation_key(t.text))
    if mode == SORT_ALPHA_DESC:
        return sorted(tasks, key=lambda t: collation_key(t.text), reverse=True)
    if mode == SORT_CREATED_NEWEST:
        return sorted(tasks, key=lambda t: t.created_at, reverse=True)
    if mode == SORT_CREATED_OLDEST:
        return sorted(tasks, key=lambda t: t.created_at)
    # default: latest modified first
    return sorted(tasks, key=lambda t: t.last_modified, reverse=True)


def summarize(tasks: Iterable[TaskRecord]) -> TaskSummary:
    total = 0
    remaining = 0
    for task in tasks:
        total += 1
        if not task.completed:
            remaining += 1
    return TaskSummary(remaining=remaining, completed=total - remaining, total=total)


def compute_view(tasks: Sequence[TaskRecord], state: ViewState, today: date) -> TaskView:
    searched = [t for t in tasks if matches_search(t, state.search_query)]
    filtered = apply_filter(searched, state.filter_mode, today)
    ordered = sort_tasks(filtered, state.sort_mode)
    return TaskView(
        active=tuple(t for t in ordered if not t.completed),
        completed=tuple(t for t in ordered if t.completed),
        summary=summarize(tasks),
    )
