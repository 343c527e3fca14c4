from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional


# PUBLIC_INTERFACE
@dataclass
class Task:
    """
    Domain model of a task as held by the storage backends.

    Fields:
    - id: Storage-assigned integer identifier (0 until persisted)
    - title: Short title (1..200 chars, trimmed on input via schemas)
    - description: Optional detailed description (<= 2000 chars)
    - is_completed: Completion flag, False on creation
    - due_date: Optional due datetime, not required to be in the future
    - created_at: UTC creation timestamp, set once by the repository
    - updated_at: UTC timestamp of the last successful update, None if never updated
    """

    title: str
    description: Optional[str] = None
    is_completed: bool = False
    due_date: Optional[datetime] = None
    id: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def copy(self) -> "Task":
        return replace(self)
