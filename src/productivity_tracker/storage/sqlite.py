# src/productivity_tracker/storage/sqlite.py

from __future__ import annotations

"""
Shared SQLite helpers.

Users and tasks live in one database file because the overdue sweep joins
them. Both stores call ensure_schema() on startup; it is idempotent.

Thread-safety:
- every operation opens its own connection (no shared cursors)
"""

import contextlib
import logging
import sqlite3
from collections.abc import Iterator
from pathlib import Path

from ..core.errors import StoreError

logger = logging.getLogger(__name__)


def connect(db_path: str | Path) -> sqlite3.Connection:
    conn = sqlite3.connect(str(db_path), timeout=30.0)
    conn.row_factory = sqlite3.Row
    with contextlib.suppress(Exception):
        conn.execute("PRAGMA foreign_keys=ON")
    with contextlib.suppress(Exception):
        conn.execute("PRAGMA journal_mode=WAL")
    return conn


@contextlib.contextmanager
def open_db(db_path: str | Path, *, immediate: bool = False) -> Iterator[sqlite3.Connection]:
    """
    Yield a connection, commit on success, roll back on any exception.

    immediate=True takes the write lock up front (BEGIN IMMEDIATE) so a
    read-modify-write sequence cannot interleave with another writer.
    sqlite3.Error is re-raised as StoreError; tracker errors pass through.
    """
    try:
        conn = connect(db_path)
    except sqlite3.Error as e:
        raise StoreError(f"cannot open database {db_path}: {e}") from e

    try:
        if immediate:
            conn.execute("BEGIN IMMEDIATE")
        yield conn
        conn.commit()
    except sqlite3.Error as e:
        with contextlib.suppress(sqlite3.Error):
            conn.rollback()
        raise StoreError(str(e)) from e
    except BaseException:
        with contextlib.suppress(sqlite3.Error):
            conn.rollback()
        raise
    finally:
        conn.close()


def ensure_schema(db_path: str | Path) -> None:
    """Create users/tasks tables and add columns missing from older files."""
    path = Path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open_db(path) as conn:
        cur = conn.cursor()

        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS users (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                username TEXT NOT NULL,
                email TEXT NOT NULL UNIQUE,
                password_hash TEXT NOT NULL,
                created_at TEXT NOT NULL
            )
            """
        )

        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS tasks (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL REFERENCES users(id),
                title TEXT NOT NULL,
                description TEXT NOT NULL DEFAULT '',
                due_date TEXT NOT NULL,
                priority TEXT NOT NULL DEFAULT 'Medium',
                is_completed INTEGER NOT NULL DEFAULT 0,
                completed_at TEXT,
                created_at TEXT NOT NULL
            )
            """
        )

        cur.execute("PRAGMA table_info(tasks)")
        cols = {row["name"] for row in cur.fetchall()}

        def add_col(name: str, decl: str) -> None:
            if name in cols:
                return
            cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
            logger.info("Schema migration: added tasks.%s", name)

        add_col("description", "TEXT NOT NULL DEFAULT ''")
        add_col("priority", "TEXT NOT NULL DEFAULT 'Medium'")
        add_col("is_completed", "INTEGER NOT NULL DEFAULT 0")
        add_col("completed_at", "TEXT")

        cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_owner_due ON tasks(user_id, due_date)")
        cur.execute(
            "CREATE INDEX IF NOT EXISTS idx_tasks_owner_completed "
            "ON tasks(user_id, is_completed, completed_at)"
        )
