# src/productivity_tracker/tasks/task_store.py

from __future__ import annotations

import logging
import sqlite3
from datetime import date, datetime
from pathlib import Path
from typing import Any

from ..core.errors import NotFoundError
from ..storage.sqlite import ensure_schema, open_db
from .task_models import (
    PRIORITY_RANK,
    UNKNOWN_PRIORITY_RANK,
    OverdueReminder,
    Priority,
    Task,
    format_ts,
    parse_due_date,
    parse_ts,
    require_title,
    utc_now,
)

logger = logging.getLogger(__name__)

_PRIORITY_CASE = (
    "CASE priority "
    + " ".join(f"WHEN '{name}' THEN {rank}" for name, rank in PRIORITY_RANK.items())
    + f" ELSE {UNKNOWN_PRIORITY_RANK} END"
)

# Dashboard ordering: priority rank, then due date, then newest first.
_DASHBOARD_ORDER = f"""
    ORDER BY
        {_PRIORITY_CASE} ASC,
        due_date ASC,
        created_at DESC,
        id DESC
"""


def _as_id(raw: Any) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise NotFoundError("Task not found") from None


class TaskStore:
    """
    SQLite task store.

    Every read and write is filtered on the owner id; a task id that belongs to
    somebody else behaves exactly like a missing one (NotFoundError).

    completed_at is written only here, together with is_completed, so the pair
    never disagrees: set when a task becomes completed, cleared when it stops
    being completed.

    Thread-safety:
    - each method opens its own SQLite connection
    - update/toggle run inside BEGIN IMMEDIATE
    """

    def __init__(self, db_path: str | Path = "tracker.sqlite3") -> None:
        self._db_path = Path(db_path)
        ensure_schema(self._db_path)
        try:
            total = self.count_tasks()
        except Exception:
            total = -1
        logger.info("TaskStore ready db=%s total=%s", self._db_path, total)

    # ---- low-level helpers ----

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        created_at = parse_ts(row["created_at"])
        if created_at is None:
            raise ValueError(f"task {row['id']} has no created_at")
        return Task(
            id=int(row["id"]),
            user_id=int(row["user_id"]),
            title=str(row["title"] or ""),
            description=str(row["description"] or ""),
            due_date=parse_due_date(row["due_date"]),
            priority=str(row["priority"] or Priority.MEDIUM.value),
            is_completed=bool(row["is_completed"]),
            completed_at=parse_ts(row["completed_at"]),
            created_at=created_at,
        )

    def _select(self, sql: str, params: tuple[Any, ...]) -> list[Task]:
        with open_db(self._db_path) as conn:
            rows = conn.execute(sql, params).fetchall()
        return [self._row_to_task(r) for r in rows]

    @staticmethod
    def _fetch_owned(conn: sqlite3.Connection, owner_id: int, task_id: int) -> sqlite3.Row:
        row = conn.execute(
            "SELECT * FROM tasks WHERE id = ? AND user_id = ?",
            (task_id, int(owner_id)),
        ).fetchone()
        if row is None:
            raise NotFoundError("Task not found")
        return row

    # ---- public API ----

    def count_tasks(self) -> int:
        with open_db(self._db_path) as conn:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
        return int(n)

    def create_task(
        self,
        owner_id: int,
        *,
        title: str,
        due_date: Any,
        description: str | None = "",
        priority: str | None = None,
        now: datetime | None = None,
    ) -> Task:
        clean_title = require_title(title)
        due = parse_due_date(due_date)
        created_at = format_ts(now or utc_now())

        with open_db(self._db_path) as conn:
            cur = conn.execute(
                """
                INSERT INTO tasks(
                    user_id, title, description, due_date, priority,
                    is_completed, completed_at, created_at
                )
                VALUES (?, ?, ?, ?, ?, 0, NULL, ?)
                """,
                (
                    int(owner_id),
                    clean_title,
                    (description or "").strip(),
                    due.isoformat(),
                    Priority.normalize(priority),
                    created_at,
                ),
            )
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for tasks insert")
            row = self._fetch_owned(conn, owner_id, int(rowid))

        task = self._row_to_task(row)
        logger.debug("Task created id=%s owner=%s due=%s", task.id, owner_id, task.due_date)
        return task

    def get_task(self, owner_id: int, task_id: int) -> Task:
        tid = _as_id(task_id)
        with open_db(self._db_path) as conn:
            row = self._fetch_owned(conn, owner_id, tid)
        return self._row_to_task(row)

    def list_tasks(self, owner_id: int) -> list[Task]:
        """All tasks of the owner in dashboard order."""
        return self._select(
            f"SELECT * FROM tasks WHERE user_id = ? {_DASHBOARD_ORDER}",
            (int(owner_id),),
        )

    def list_tasks_in_range(self, owner_id: int, start: Any, end: Any) -> list[Task]:
        """Tasks due within [start, end] inclusive, earliest first."""
        start_d = parse_due_date(start)
        end_d = parse_due_date(end)
        return self._select(
            """
            SELECT *
            FROM tasks
            WHERE user_id = ?
              AND DATE(due_date) BETWEEN ? AND ?
            ORDER BY due_date ASC, id ASC
            """,
            (int(owner_id), start_d.isoformat(), end_d.isoformat()),
        )

    def list_overdue_tasks(self, owner_id: int, as_of: date) -> list[Task]:
        return self._select(
            """
            SELECT *
            FROM tasks
            WHERE user_id = ?
              AND DATE(due_date) < ?
              AND is_completed = 0
            ORDER BY due_date ASC, id ASC
            """,
            (int(owner_id), as_of.isoformat()),
        )

    def list_tasks_due_on(self, owner_id: int, as_of: date) -> list[Task]:
        return self._select(
            """
            SELECT *
            FROM tasks
            WHERE user_id = ?
              AND DATE(due_date) = ?
            ORDER BY created_at DESC, id DESC
            """,
            (int(owner_id), as_of.isoformat()),
        )

    def update_task(
        self,
        owner_id: int,
        task_id: int,
        *,
        title: str,
        due_date: Any,
        description: str | None = "",
        priority: str | None = None,
        is_completed: bool | None = None,
        now: datetime | None = None,
    ) -> Task:
        """
        Full update of the editable fields.

        is_completed=None keeps the current completion state. Completion
        changes follow the toggle rules: false -> true stamps completed_at,
        true -> false clears it, true -> true keeps the original stamp.
        """
        clean_title = require_title(title)
        due = parse_due_date(due_date)
        tid = _as_id(task_id)

        with open_db(self._db_path, immediate=True) as conn:
            current = self._fetch_owned(conn, owner_id, tid)
            was_completed = bool(current["is_completed"])
            completed = was_completed if is_completed is None else bool(is_completed)

            if completed and not was_completed:
                completed_at = format_ts(now or utc_now())
            elif completed:
                completed_at = current["completed_at"] or format_ts(now or utc_now())
            else:
                completed_at = None

            conn.execute(
                """
                UPDATE tasks
                SET title = ?,
                    description = ?,
                    due_date = ?,
                    priority = ?,
                    is_completed = ?,
                    completed_at = ?
                WHERE id = ? AND user_id = ?
                """,
                (
                    clean_title,
                    (description or "").strip(),
                    due.isoformat(),
                    Priority.normalize(priority),
                    1 if completed else 0,
                    completed_at,
                    tid,
                    int(owner_id),
                ),
            )
            row = self._fetch_owned(conn, owner_id, tid)

        logger.debug("Task updated id=%s owner=%s completed=%s", tid, owner_id, completed)
        return self._row_to_task(row)

    def toggle_completion(self, owner_id: int, task_id: int, now: datetime | None = None) -> Task:
        """Flip is_completed; a task toggled twice ends with completed_at = NULL."""
        tid = _as_id(task_id)

        with open_db(self._db_path, immediate=True) as conn:
            current = self._fetch_owned(conn, owner_id, tid)
            completed = not bool(current["is_completed"])
            completed_at = format_ts(now or utc_now()) if completed else None

            conn.execute(
                "UPDATE tasks SET is_completed = ?, completed_at = ? WHERE id = ? AND user_id = ?",
                (1 if completed else 0, completed_at, tid, int(owner_id)),
            )
            row = self._fetch_owned(conn, owner_id, tid)

        logger.debug("Task %s -> %s (owner=%s)", tid, "completed" if completed else "open", owner_id)
        return self._row_to_task(row)

    def delete_task(self, owner_id: int, task_id: int) -> int:
        tid = _as_id(task_id)
        with open_db(self._db_path) as conn:
            cur = conn.execute(
                "DELETE FROM tasks WHERE id = ? AND user_id = ?",
                (tid, int(owner_id)),
            )
            if cur.rowcount != 1:
                raise NotFoundError("Task not found")
        logger.debug("Task deleted id=%s owner=%s", tid, owner_id)
        return tid

    # ---- aggregation ----

    def completion_counts_by_day(self, owner_id: int, start: date, end: date) -> list[tuple[str, int]]:
        """
        (YYYY-MM-DD, count) for each day in [start, end] with at least one
        completion, ascending by day. Days without completions are absent.
        """
        with open_db(self._db_path) as conn:
            rows = conn.execute(
                """
                SELECT DATE(completed_at) AS day, COUNT(*) AS n
                FROM tasks
                WHERE user_id = ?
                  AND is_completed = 1
                  AND completed_at IS NOT NULL
                  AND DATE(completed_at) >= ?
                  AND DATE(completed_at) <= ?
                GROUP BY DATE(completed_at)
                ORDER BY day ASC
                """,
                (int(owner_id), start.isoformat(), end.isoformat()),
            ).fetchall()
        return [(str(r["day"]), int(r["n"])) for r in rows]

    def completion_totals(self, owner_id: int, start: date, end: date) -> tuple[int, str | None, int]:
        """(total completed, latest completed_at, distinct productive days) in [start, end]."""
        with open_db(self._db_path) as conn:
            row = conn.execute(
                """
                SELECT COUNT(*) AS total_completed,
                       MAX(completed_at) AS last_completed,
                       COUNT(DISTINCT DATE(completed_at)) AS productive_days
                FROM tasks
                WHERE user_id = ?
                  AND is_completed = 1
                  AND completed_at IS NOT NULL
                  AND DATE(completed_at) >= ?
                  AND DATE(completed_at) <= ?
                """,
                (int(owner_id), start.isoformat(), end.isoformat()),
            ).fetchone()
        return (
            int(row["total_completed"] or 0),
            row["last_completed"],
            int(row["productive_days"] or 0),
        )

    # ---- scanner ----

    def list_overdue_reminders(self, as_of: date) -> list[OverdueReminder]:
        """
        Incomplete tasks due before as_of, across all owners, joined with the
        owner's contact info. Read-only.
        """
        with open_db(self._db_path) as conn:
            rows = conn.execute(
                """
                SELECT t.id AS task_id, t.user_id, t.title, t.description, t.due_date,
                       u.username, u.email
                FROM tasks t
                JOIN users u ON u.id = t.user_id
                WHERE DATE(t.due_date) < ?
                  AND t.is_completed = 0
                ORDER BY t.due_date ASC, t.id ASC
                """,
                (as_of.isoformat(),),
            ).fetchall()
        return [
            OverdueReminder(
                task_id=int(r["task_id"]),
                user_id=int(r["user_id"]),
                username=str(r["username"] or ""),
                email=str(r["email"] or ""),
                title=str(r["title"] or ""),
                description=str(r["description"] or ""),
                due_date=parse_due_date(r["due_date"]),
            )
            for r in rows
        ]
