# src/productivity_tracker/accounts/user_store.py

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from ..core.errors import NotFoundError, ValidationError
from ..storage.sqlite import ensure_schema, open_db
from ..tasks.task_models import format_ts, parse_ts, utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class User:
    id: int
    username: str
    email: str
    password_hash: str
    created_at: datetime | None

    def to_public_dict(self) -> dict[str, object]:
        return {"id": self.id, "username": self.username, "email": self.email}


class UserStore:
    """
    SQLite user store.

    Users are created at signup and never mutated or deleted here.
    Emails are stored lower-cased; uniqueness is enforced by the schema.
    """

    def __init__(self, db_path: str | Path = "tracker.sqlite3") -> None:
        self._db_path = Path(db_path)
        ensure_schema(self._db_path)
        logger.info("UserStore ready db=%s", self._db_path)

    @staticmethod
    def _row_to_user(row: sqlite3.Row) -> User:
        return User(
            id=int(row["id"]),
            username=str(row["username"] or ""),
            email=str(row["email"] or ""),
            password_hash=str(row["password_hash"] or ""),
            created_at=parse_ts(row["created_at"]),
        )

    def create_user(self, *, username: str, email: str, password_hash: str) -> User:
        email_norm = (email or "").strip().lower()
        with open_db(self._db_path, immediate=True) as conn:
            existing = conn.execute("SELECT id FROM users WHERE email = ?", (email_norm,)).fetchone()
            if existing is not None:
                raise ValidationError("User with this email already exists")

            cur = conn.execute(
                "INSERT INTO users(username, email, password_hash, created_at) VALUES (?, ?, ?, ?)",
                ((username or "").strip(), email_norm, password_hash, format_ts(utc_now())),
            )
            row = conn.execute("SELECT * FROM users WHERE id = ?", (cur.lastrowid,)).fetchone()

        user = self._row_to_user(row)
        logger.info("User created id=%s", user.id)
        return user

    def get_user(self, user_id: int) -> User:
        with open_db(self._db_path) as conn:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (int(user_id),)).fetchone()
        if row is None:
            raise NotFoundError("User not found")
        return self._row_to_user(row)

    def find_by_email(self, email: str) -> User | None:
        email_norm = (email or "").strip().lower()
        if not email_norm:
            return None
        with open_db(self._db_path) as conn:
            row = conn.execute("SELECT * FROM users WHERE email = ?", (email_norm,)).fetchone()
        return self._row_to_user(row) if row else None
