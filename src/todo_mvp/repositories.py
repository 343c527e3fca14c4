from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from threading import RLock
from typing import Dict, List, Optional

from .models import Task
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# PUBLIC_INTERFACE
class TaskRepository(ABC):
    """
    Abstract repository contract for task storage backends.

    "Not found" is never an exception here: lookups return None and writes
    return False. Storage faults raise StorageError.
    """

    @abstractmethod
    def list_all(self) -> List[Task]:
        """Return every task ordered by id ascending (empty list if none)."""

    @abstractmethod
    def get_by_id(self, task_id: int) -> Optional[Task]:
        """Return a Task by id, or None if not found."""

    @abstractmethod
    def add(self, task: Task) -> Task:
        """Persist a new task, assigning id and created_at. Return the stored task."""

    @abstractmethod
    def update(self, task: Task) -> bool:
        """
        Overwrite title/description/is_completed/due_date of the stored task with
        the same id and stamp updated_at. Return False (and do nothing) if absent.
        """

    @abstractmethod
    def delete_by_id(self, task_id: int) -> bool:
        """Delete a task by id. Return True if deleted, False if not found."""


class InMemoryTaskRepository(TaskRepository):
    """
    Thread-safe in-memory repository suitable for testing and default runtime.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: Dict[int, Task] = {}
        self._next_id = 1

    def _now(self) -> datetime:
        return utc_now()

    def _allocate_id(self) -> int:
        with self._lock:
            i = self._next_id
            self._next_id += 1
            return i

    def list_all(self) -> List[Task]:
        with self._lock:
            return [self._items[k].copy() for k in sorted(self._items)]

    def get_by_id(self, task_id: int) -> Optional[Task]:
        with self._lock:
            item = self._items.get(task_id)
            return None if item is None else item.copy()

    def add(self, task: Task) -> Task:
        stored = task.copy()
        with self._lock:
            stored.id = self._allocate_id()
            stored.created_at = self._now()
            stored.updated_at = None
            self._items[stored.id] = stored
        return stored.copy()

    def update(self, task: Task) -> bool:
        with self._lock:
            existing = self._items.get(task.id)
            if existing is None:
                return False

            updated = existing.copy()
            updated.title = task.title
            updated.description = task.description
            updated.is_completed = task.is_completed
            updated.due_date = task.due_date
            updated.updated_at = self._now()
            self._items[task.id] = updated
            return True

    def delete_by_id(self, task_id: int) -> bool:
        with self._lock:
            return self._items.pop(task_id, None) is not None


# PUBLIC_INTERFACE
def get_repository(settings: Optional[Settings] = None) -> TaskRepository:
    """
    Factory to return the configured repository based on settings.
    - memory: InMemoryTaskRepository
    - sqlite: SQLiteTaskRepository (standard library sqlite3)
    """
    settings = settings or get_settings()
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteTaskRepository

        logger.info("Using SQLite task storage at %s", settings.sqlite_db_path)
        return SQLiteTaskRepository(settings.sqlite_db_path)
    logger.info("Using in-memory task storage")
    return InMemoryTaskRepository()
