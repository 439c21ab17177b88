from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, Sequence

from tasktrack.domain.tasks.models import TaskRecord


class Clock(ABC):
    @abstractmethod
    def now(self) -> datetime: ...


class IdGenerator(ABC):
    @abstractmethod
    def new_id(self) -> int: ...


class KeyValueStore(ABC):
    """Durable local medium with get/set semantics."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]: ...

    @abstractmethod
    async def set(self, key: str, value: str) -> None: ...


class TaskPersistence(ABC):
    @abstractmethod
    async def load(self) -> Sequence[TaskRecord]: ...

    @abstractmethod
    async def save(self, tasks: Sequence[TaskRecord]) -> None: ...
