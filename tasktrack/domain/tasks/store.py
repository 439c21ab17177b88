from __future__ import annotations

import asyncio
import dataclasses
import logging
from datetime import date
from typing import Dict, Optional, Tuple, Union

from tasktrack.domain.common.errors import NotFoundError, PersistenceError
from tasktrack.domain.common.time import parse_due_date
from tasktrack.domain.tasks.models import TaskRecord
from tasktrack.domain.tasks.ports import Clock, IdGenerator, TaskPersistence
from tasktrack.domain.tasks.rules import normalize_description, validate_text

logger = logging.getLogger(__name__)

DueDateInput = Union[None, str, date]


class TaskStore:
    """
    Owns the task collection. No sqlite, no UI.

    Every mutation replaces the affected record(s) and then saves the whole
    collection while holding the write lock, so saves happen in mutation
    order. If the save fails the in-memory change stays and the
    PersistenceError reaches the caller.

    delete() of an unknown id raises NotFoundError, same as update/toggle.
    """

    def __init__(self, persistence: TaskPersistence, clock: Clock, ids: IdGenerator) -> None:
        self._persistence = persistence
        self._clock = clock
        self._ids = ids
        self._tasks: Dict[int, TaskRecord] = {}
        self._highest_id = 0
        self._lock = asyncio.Lock()

    async def bootstrap(self) -> None:
        loaded = await self._persistence.load()
        self._tasks = {t.id: t for t in loaded}
        self._highest_id = max(self._tasks, default=0)
        logger.info("Loaded %d task(s)", len(self._tasks))

    # -------------------- queries --------------------
    def list(self) -> Tuple[TaskRecord, ...]:
        return tuple(self._tasks.values())

    def get(self, task_id: int) -> Optional[TaskRecord]:
        return self._tasks.get(task_id)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    def _require(self, task_id: int) -> TaskRecord:
        task = self._tasks.get(task_id)
        if task is None:
            raise NotFoundError(f"Task {task_id} not found.")
        return task

    def _allocate_id(self) -> int:
        # never hand out an id at or below one already seen, even after deletes
        tid = self._ids.new_id()
        if tid <= self._highest_id:
            tid = self._highest_id + 1
        self._highest_id = tid
        return tid

    async def _persist(self, action: str) -> None:
        snapshot = self.list()
        try:
            await self._persistence.save(snapshot)
        except PersistenceError:
            logger.error("Saving after %s failed; in-memory state kept", action, exc_info=True)
            raise

    # -------------------- mutations --------------------
    async def create(
        self,
        text: str,
        description: Optional[str] = None,
        due_date: DueDateInput = None,
    ) -> TaskRecord:
        validate_text(text)
        description = normalize_description(description)
        due = parse_due_date(due_date)

        async with self._lock:
            now = self._clock.now()
            task = TaskRecord(
                id=self._allocate_id(),
                text=text,
                description=description,
                due_date=due,
                completed=False,
                created_at=now,
                last_modified=now,
                completed_at=None,
            )
            self._tasks[task.id] = task
            logger.info("Task created id=%s", task.id)
            await self._persist("create")
        return task

    async def update(
        self,
        task_id: int,
        text: str,
        description: Optional[str] = None,
        due_date: DueDateInput = None,
    ) -> TaskRecord:
        validate_text(text)
        description = normalize_description(description)
        due = parse_due_date(due_date)

        async with self._lock:
            current = self._require(task_id)
            task = dataclasses.replace(
                current,
                text=text,
                description=description,
                due_date=due,
                last_modified=max(self._clock.now(), current.created_at),
            )
            self._tasks[task_id] = task
            logger.info("Task updated id=%s", task_id)
            await self._persist("update")
        return task

    async def toggle_complete(self, task_id: int) -> TaskRecord:
        async with self._lock:
            current = self._require(task_id)
            now = max(self._clock.now(), current.created_at)
            completed = not current.completed
            task = dataclasses.replace(
                current,
                completed=completed,
                last_modified=now,
                completed_at=now if completed else None,
            )
            self._tasks[task_id] = task
            logger.info("Task %s id=%s", "completed" if completed else "reopened", task_id)
            await self._persist("toggle")
        return task

    async def delete(self, task_id: int) -> TaskRecord:
        async with self._lock:
            task = self._require(task_id)
            del self._tasks[task_id]
            logger.info("Task deleted id=%s", task_id)
            await self._persist("delete")
        return task

    async def clear_completed(self) -> int:
        """Drop every completed task with a single save. Returns how many were removed."""
        async with self._lock:
            done = [tid for tid, t in self._tasks.items() if t.completed]
            if not done:
                return 0
            for tid in done:
                del self._tasks[tid]
            logger.info("Cleared %d completed task(s)", len(done))
            await self._persist("clear_completed")
        return len(done)
