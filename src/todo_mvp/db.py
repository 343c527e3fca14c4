from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Generator, List, Optional

from .errors import StorageError
from .models import Task
from .repositories import TaskRepository, utc_now


@dataclass(frozen=True)
class _Cols:
    table: str = "tasks"
    id: str = "id"
    title: str = "title"
    description: str = "description"
    is_completed: str = "is_completed"
    due_date: str = "due_date"
    created_at: str = "created_at"
    updated_at: str = "updated_at"


_COLS = _Cols()


def _to_text(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _from_text(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromisoformat(value)


class SQLiteTaskRepository(TaskRepository):
    """
    Lightweight SQLite repository implementing the TaskRepository contract.

    Every call opens its own connection, so the repository can be shared
    between request handlers running on different threads.
    """

    def __init__(self, db_path: str) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._init_db()

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        try:
            conn = sqlite3.connect(self._db_path)
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open task database at {self._db_path}") from e
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError("Task database operation failed") from e
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_COLS.table} (
                    {_COLS.id} INTEGER PRIMARY KEY AUTOINCREMENT,
                    {_COLS.title} TEXT NOT NULL,
                    {_COLS.description} TEXT NULL,
                    {_COLS.is_completed} INTEGER NOT NULL DEFAULT 0,
                    {_COLS.due_date} TEXT NULL,
                    {_COLS.created_at} TEXT NOT NULL,
                    {_COLS.updated_at} TEXT NULL
                )
                """
            )

    def _row_to_entity(self, row: sqlite3.Row) -> Task:
        return Task(
            id=int(row[_COLS.id]),
            title=str(row[_COLS.title]),
            description=row[_COLS.description],
            is_completed=bool(row[_COLS.is_completed]),
            due_date=_from_text(row[_COLS.due_date]),
            created_at=_from_text(row[_COLS.created_at]),
            updated_at=_from_text(row[_COLS.updated_at]),
        )

    def list_all(self) -> List[Task]:
        with self._conn() as conn:
            rows = conn.execute(f"SELECT * FROM {_COLS.table} ORDER BY {_COLS.id} ASC").fetchall()
            return [self._row_to_entity(r) for r in rows]

    def get_by_id(self, task_id: int) -> Optional[Task]:
        with self._conn() as conn:
            row = conn.execute(f"SELECT * FROM {_COLS.table} WHERE {_COLS.id} = ?", (task_id,)).fetchone()
            return self._row_to_entity(row) if row else None

    def add(self, task: Task) -> Task:
        with self._conn() as conn:
            cur = conn.execute(
                f"""
                INSERT INTO {_COLS.table} ({_COLS.title}, {_COLS.description}, {_COLS.is_completed},
                    {_COLS.due_date}, {_COLS.created_at}, {_COLS.updated_at})
                VALUES (?, ?, ?, ?, ?, NULL)
                """,
                (
                    task.title,
                    task.description,
                    1 if task.is_completed else 0,
                    _to_text(task.due_date),
                    _to_text(utc_now()),
                ),
            )
            row = conn.execute(
                f"SELECT * FROM {_COLS.table} WHERE {_COLS.id} = ?", (cur.lastrowid,)
            ).fetchone()
            if row is None:
                raise StorageError("Inserted task could not be read back")
            return self._row_to_entity(row)

    def update(self, task: Task) -> bool:
        with self._conn() as conn:
            cur = conn.execute(
                f"""
                UPDATE {_COLS.table}
                SET {_COLS.title} = ?, {_COLS.description} = ?, {_COLS.is_completed} = ?,
                    {_COLS.due_date} = ?, {_COLS.updated_at} = ?
                WHERE {_COLS.id} = ?
                """,
                (
                    task.title,
                    task.description,
                    1 if task.is_completed else 0,
                    _to_text(task.due_date),
                    _to_text(utc_now()),
                    task.id,
                ),
            )
            return cur.rowcount > 0

    def delete_by_id(self, task_id: int) -> bool:
        with self._conn() as conn:
            cur = conn.execute(f"DELETE FROM {_COLS.table} WHERE {_COLS.id} = ?", (task_id,))
            return cur.rowcount > 0
