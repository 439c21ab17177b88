# -*- coding: utf-8 -*-
"""
JSON codec for the task collection on top of a KeyValueStore.

The whole collection is one JSON array stored under a single key, using
the field names id, text, description, dueDate, completed, createdAt,
lastModified, completedAt. Absent optionals are written as null.
"""
from __future__ import annotations

import asyncio
import json
import logging
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from tasktrack.constants import STORAGE_KEY
from tasktrack.domain.common.errors import PersistenceError
from tasktrack.domain.common.time import from_iso, to_iso
from tasktrack.domain.tasks.models import TaskRecord
from tasktrack.domain.tasks.ports import KeyValueStore, TaskPersistence

logger = logging.getLogger(__name__)


def task_to_dict(task: TaskRecord) -> Dict[str, Any]:
    return {
        "id": task.id,
        "text": task.text,
        "description": task.description,
        "dueDate": task.due_date.isoformat() if task.due_date else None,
        "completed": task.completed,
        "createdAt": to_iso(task.created_at),
        "lastModified": to_iso(task.last_modified),
        "completedAt": to_iso(task.completed_at) if task.completed_at else None,
    }


def task_from_dict(raw: Dict[str, Any]) -> TaskRecord:
    """
    Build a record from stored JSON, repairing invariants on the way:
    - completed without completedAt -> completedAt = lastModified
    - completedAt on an open task -> dropped
    - lastModified before createdAt -> raised to createdAt

    Raises ValueError, TypeError, KeyError or AttributeError for unusable entries.
    """
    if not isinstance(raw, dict):
        raise TypeError(f"expected object, got {type(raw).__name__}")

    task_id = raw["id"]
    if isinstance(task_id, bool) or not isinstance(task_id, int):
        raise TypeError(f"id must be an integer, got {task_id!r}")

    text = raw["text"]
    if not isinstance(text, str) or not text.strip():
        raise ValueError("text must be a non-empty string")

    description = raw.get("description") or ""
    if not isinstance(description, str):
        raise TypeError("description must be a string")

    due_raw = raw.get("dueDate")
    due_date: Optional[date] = date.fromisoformat(due_raw) if due_raw else None

    completed = raw.get("completed", False)
    if not isinstance(completed, bool):
        raise TypeError("completed must be a boolean")

    created_at = from_iso(raw["createdAt"])
    modified_raw = raw.get("lastModified")
    last_modified = from_iso(modified_raw) if modified_raw else created_at
    if last_modified < created_at:
        last_modified = created_at

    completed_raw = raw.get("completedAt")
    completed_at = from_iso(completed_raw) if completed_raw else None
    if completed and completed_at is None:
        completed_at = last_modified
    elif not completed:
        completed_at = None

    return TaskRecord(
        id=task_id,
        text=text,
        description=description,
        due_date=due_date,
        completed=completed,
        created_at=created_at,
        last_modified=last_modified,
        completed_at=completed_at,
    )


def encode_tasks(tasks: Sequence[TaskRecord]) -> str:
    return json.dumps([task_to_dict(t) for t in tasks], ensure_ascii=False)


def decode_tasks(payload: str) -> List[TaskRecord]:
    """Decode a stored collection. Malformed entries and duplicate ids are skipped."""
    data = json.loads(payload)
    if not isinstance(data, list):
        raise ValueError(f"expected a JSON array, got {type(data).__name__}")

    tasks: List[TaskRecord] = []
    seen: set[int] = set()
    for index, raw in enumerate(data):
        try:
            task = task_from_dict(raw)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping malformed task entry #%d: %s", index, exc)
            continue
        if task.id in seen:
            logger.warning("Skipping duplicate task id=%s at entry #%d", task.id, index)
            continue
        seen.add(task.id)
        tasks.append(task)
    return tasks


class JsonTaskPersistence(TaskPersistence):
    def __init__(self, kv: KeyValueStore, key: str = STORAGE_KEY, timeout: float = 5.0) -> None:
        self._kv = kv
        self._key = key
        self._timeout = timeout

    async def load(self) -> List[TaskRecord]:
        """Never raises: a missing, unreadable or corrupt store loads as empty."""
        try:
            payload = await asyncio.wait_for(self._kv.get(self._key), timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.warning("Timed out reading %r; starting with an empty collection", self._key)
            return []
        except PersistenceError as exc:
            logger.warning("Could not read %r (%s); starting with an empty collection", self._key, exc)
            return []

        if payload is None:
            return []

        try:
            return decode_tasks(payload)
        except (ValueError, RecursionError) as exc:
            # json.JSONDecodeError is a ValueError; absurd nesting hits the recursion limit
            logger.warning("Stored tasks under %r are unreadable (%s); starting empty", self._key, exc)
            return []

    async def save(self, tasks: Sequence[TaskRecord]) -> None:
        payload = encode_tasks(tasks)
        try:
            await asyncio.wait_for(self._kv.set(self._key, payload), timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            raise PersistenceError(f"Timed out writing {self._key!r} after {self._timeout}s") from exc
