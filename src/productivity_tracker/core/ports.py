# src/productivity_tracker/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

Reports, reminders and connectors depend on these Protocols instead of the
concrete SQLite stores, so tests can swap in small in-memory fakes.
"""

from datetime import date, datetime
from typing import Any, Awaitable, Protocol


class NotificationSink(Protocol):
    """
    Outbound notification port (email, chat, log...).

    Implementations raise NotificationError when a single delivery fails;
    the caller decides whether that aborts anything (the scanner never does).
    """

    def send(self, *, recipient: str, subject: str, body: str) -> Awaitable[None]: ...


class PasswordHasher(Protocol):
    """Opaque credential capability used by signup/login only."""

    def hash(self, plaintext: str) -> str: ...
    def verify(self, plaintext: str, hashed: str) -> bool: ...


class UserRepo(Protocol):
    def create_user(self, *, username: str, email: str, password_hash: str) -> Any: ...
    def get_user(self, user_id: int) -> Any: ...
    def find_by_email(self, email: str) -> Any | None: ...


class TaskRepo(Protocol):
    # Owner-scoped CRUD
    def create_task(
            self,
            owner_id: int,
            *,
            title: str,
            due_date: Any,
            description: str | None = "",
            priority: str | None = None,
            now: datetime | None = None,
    ) -> Any: ...
    def get_task(self, owner_id: int, task_id: int) -> Any: ...
    def list_tasks(self, owner_id: int) -> list[Any]: ...
    def list_tasks_in_range(self, owner_id: int, start: Any, end: Any) -> list[Any]: ...
    def list_overdue_tasks(self, owner_id: int, as_of: date) -> list[Any]: ...
    def list_tasks_due_on(self, owner_id: int, as_of: date) -> list[Any]: ...
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
    ) -> Any: ...
    def toggle_completion(self, owner_id: int, task_id: int, now: datetime | None = None) -> Any: ...
    def delete_task(self, owner_id: int, task_id: int) -> int: ...

    # Aggregation API (reports)
    def completion_counts_by_day(self, owner_id: int, start: date, end: date) -> list[tuple[str, int]]: ...
    def completion_totals(self, owner_id: int, start: date, end: date) -> tuple[int, str | None, int]: ...

    # Scanner API (cross-owner, read-only)
    def list_overdue_reminders(self, as_of: date) -> list[Any]: ...
