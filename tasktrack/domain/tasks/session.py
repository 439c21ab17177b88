from __future__ import annotations

import dataclasses
import logging
from typing import Optional, Tuple

from tasktrack.domain.common.errors import NotFoundError
from tasktrack.domain.tasks.dates import classify_due_date, priority_level, relative_age
from tasktrack.domain.tasks.models import DueDateInfo, PriorityLevel, TaskRecord, TaskView, ViewState
from tasktrack.domain.tasks.ports import Clock
from tasktrack.domain.tasks.rules import validate_filter_mode, validate_sort_mode
from tasktrack.domain.tasks.store import DueDateInput, TaskStore
from tasktrack.domain.tasks.view import compute_view

logger = logging.getLogger(__name__)


class TaskSession:
    """
    Operation surface for a presentation layer: the store's mutations plus
    the transient view state (search, filter, sort, edit session).
    """

    def __init__(self, store: TaskStore, clock: Clock) -> None:
        self._store = store
        self._clock = clock
        self._state = ViewState()

    @property
    def store(self) -> TaskStore:
        return self._store

    @property
    def state(self) -> ViewState:
        return self._state

    # -------------------- mutations --------------------
    async def create(
        self,
        text: str,
        description: Optional[str] = None,
        due_date: DueDateInput = None,
    ) -> TaskRecord:
        return await self._store.create(text, description, due_date)

    async def update(
        self,
        task_id: int,
        text: str,
        description: Optional[str] = None,
        due_date: DueDateInput = None,
    ) -> TaskRecord:
        return await self._store.update(task_id, text, description, due_date)

    async def toggle_complete(self, task_id: int) -> TaskRecord:
        return await self._store.toggle_complete(task_id)

    async def delete(self, task_id: int) -> TaskRecord:
        removed = await self._store.delete(task_id)
        self._drop_stale_edit()
        return removed

    async def clear_completed(self) -> int:
        removed = await self._store.clear_completed()
        self._drop_stale_edit()
        return removed

    def list(self) -> Tuple[TaskRecord, ...]:
        return self._store.list()

    # -------------------- view state --------------------
    def _set(self, **changes) -> None:
        self._state = dataclasses.replace(self._state, **changes)

    def set_search_query(self, query: str) -> None:
        self._set(search_query=query or "")

    def set_filter_mode(self, mode: str) -> None:
        validate_filter_mode(mode)
        self._set(filter_mode=mode)

    def set_sort_mode(self, mode: str) -> None:
        validate_sort_mode(mode)
        self._set(sort_mode=mode)

    # -------------------- edit session --------------------
    def begin_edit(self, task_id: int) -> TaskRecord:
        """Start editing a task; returns it so the caller can prefill inputs."""
        task = self._store.get(task_id)
        if task is None:
            raise NotFoundError(f"Task {task_id} not found.")
        self._set(editing_id=task_id)
        return task

    def cancel_edit(self) -> None:
        self._set(editing_id=None)

    def _drop_stale_edit(self) -> None:
        editing_id = self._state.editing_id
        if editing_id is not None and editing_id not in self._store:
            logger.info("Edit of id=%s ended: task was removed", editing_id)
            self._set(editing_id=None)

    @property
    def editing_task(self) -> Optional[TaskRecord]:
        """The task being edited, or None once it has been removed."""
        editing_id = self._state.editing_id
        if editing_id is None:
            return None
        return self._store.get(editing_id)

    async def submit_edit(
        self,
        text: str,
        description: Optional[str] = None,
        due_date: DueDateInput = None,
    ) -> TaskRecord:
        editing_id = self._state.editing_id
        if editing_id is None:
            raise NotFoundError("No task is being edited.")
        if editing_id not in self._store:
            self._set(editing_id=None)
            logger.info("Edit target id=%s disappeared before submit", editing_id)
            raise NotFoundError(f"Task {editing_id} not found.")
        task = await self._store.update(editing_id, text, description, due_date)
        self._set(editing_id=None)
        return task

    # -------------------- derived --------------------
    def compute_view(self) -> TaskView:
        return compute_view(self._store.list(), self._state, self._clock.now().date())

    def describe_due(self, task: TaskRecord) -> DueDateInfo:
        return classify_due_date(task.due_date, self._clock.now(), task.completed)

    def priority_of(self, task: TaskRecord) -> PriorityLevel:
        return priority_level(task.due_date, self._clock.now(), task.completed)

    def age_of(self, task: TaskRecord) -> str:
        return relative_age(task.created_at, self._clock.now())
