"""SQLite storage of scheduler tasks."""

from __future__ import annotations

import re
import sqlite3
from contextlib import closing
from dataclasses import asdict, dataclass, fields
from typing import Any, Mapping

__all__ = ["Task", "TaskNotFoundError", "TaskStore", "create_table"]

_SCHEMA = """
CREATE TABLE scheduler (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    date DATE NOT NULL,
    title VARCHAR(256) NOT NULL,
    comment TEXT NOT NULL DEFAULT '',
    repeat VARCHAR(128)
);
CREATE INDEX "date" ON scheduler(date);
"""

_ID_RE = re.compile(r"[+-]?\d+")


class TaskNotFoundError(LookupError):
    """Raised when no task has the requested id."""


@dataclass
class Task:
    """A scheduled task; every field is a string as exchanged over JSON."""

    id: str = ""
    date: str = ""
    title: str = ""
    comment: str = ""
    repeat: str = ""

    def to_dict(self) -> dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Task":
        values = {}
        for field in fields(cls):
            value = data.get(field.name)
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise ValueError(f"field {field.name!r} must be a string")
            values[field.name] = value
        return cls(**values)


def create_table(path: str) -> None:
    """Create the scheduler table and its date index in the database at ``path``."""
    with closing(sqlite3.connect(path)) as conn:
        conn.executescript(_SCHEMA)
        conn.commit()


def _parse_id(task_id: str) -> int:
    text = str(task_id)
    if not _ID_RE.fullmatch(text):
        raise ValueError(f"invalid task id {task_id!r}")
    return int(text)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _row_to_task(row: tuple) -> Task:
    return Task(*(_text(value) for value in row))


class TaskStore:
    """Access to tasks kept in one SQLite database file."""

    def __init__(self, path: str) -> None:
        self.path = path

    def _connect(self) -> closing:
        return closing(sqlite3.connect(self.path))

    def add_task(self, task: Task) -> int:
        """Insert ``task`` and return the id it was given."""
        with self._connect() as conn, conn:
            cursor = conn.execute(
                "INSERT INTO scheduler (date, title, comment, repeat) VALUES (?, ?, ?, ?)",
                (task.date, task.title, task.comment, task.repeat),
            )
            return cursor.lastrowid

    def get_tasks(self, limit: int) -> list[Task]:
        """Return at most ``limit`` tasks ordered by date."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT id, date, title, comment, repeat FROM scheduler "
                "ORDER BY date ASC LIMIT ?",
                (int(limit),),
            ).fetchall()
        return [_row_to_task(row) for row in rows]

    def get_task(self, task_id: str) -> Task:
        """Return the task with ``task_id``."""
        key = _parse_id(task_id)
        with self._connect() as conn:
            row = conn.execute(
                "SELECT id, date, title, comment, repeat FROM scheduler WHERE id = ?",
                (key,),
            ).fetchone()
        if row is None:
            raise TaskNotFoundError("incorrect id")
        return _row_to_task(row)

    def update_task(self, task: Task) -> None:
        """Overwrite the stored task that has ``task.id``."""
        key = _parse_id(task.id)
        with self._connect() as conn, conn:
            cursor = conn.execute(
                "UPDATE scheduler SET date = ?, title = ?, comment = ?, repeat = ? "
                "WHERE id = ?",
                (task.date, task.title, task.comment, task.repeat, key),
            )
            if cursor.rowcount == 0:
                raise TaskNotFoundError("incorrect id for updating task")

    def delete_task(self, task_id: str) -> None:
        """Delete the task with ``task_id``; a missing task is not an error."""
        key = _parse_id(task_id)
        with self._connect() as conn, conn:
            conn.execute("DELETE FROM scheduler WHERE id = ?", (key,))