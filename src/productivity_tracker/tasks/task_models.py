# src/productivity_tracker/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime
from enum import StrEnum
from typing import Any

from ..core.errors import ValidationError


class Priority(StrEnum):
    """
    Known priority levels.

    Notes:
    - the column is free text; rows written by older clients may carry other
      values, which are kept as-is and sorted after Low.
    """

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @classmethod
    def normalize(cls, raw: str | None) -> str:
        """Canonical spelling for known levels, Medium for empty input."""
        s = (raw or "").strip()
        if not s:
            return cls.MEDIUM.value
        for p in cls:
            if p.value.lower() == s.lower():
                return p.value
        return s


PRIORITY_RANK: dict[str, int] = {
    Priority.HIGH.value: 1,
    Priority.MEDIUM.value: 2,
    Priority.LOW.value: 3,
}
UNKNOWN_PRIORITY_RANK = 4


def parse_due_date(raw: Any) -> date:
    """
    Accept a date, a datetime or an ISO-8601 string and return a calendar date.

    A time component is dropped: due dates compare as whole days.
    """
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw

    s = str(raw or "").strip()
    if not s:
        raise ValidationError("Valid due date is required")
    try:
        return date.fromisoformat(s)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(s.replace("Z", "+00:00")).date()
    except ValueError:
        raise ValidationError("Valid due date is required") from None


def require_title(raw: str | None) -> str:
    title = (raw or "").strip()
    if not title:
        raise ValidationError("Task title is required")
    return title


def utc_now() -> datetime:
    return datetime.now(UTC)


def format_ts(ts: datetime) -> str:
    """Fixed-width UTC timestamp; lexical order equals time order."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC).isoformat(timespec="microseconds")


def parse_ts(raw: str | None) -> datetime | None:
    if not raw:
        return None
    ts = datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts


@dataclass(slots=True)
class Task:
    id: int
    user_id: int
    title: str
    description: str
    due_date: date
    priority: str
    is_completed: bool
    completed_at: datetime | None
    created_at: datetime

    def to_dict(self) -> dict[str, Any]:
        """External JSON shape of a task record."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "description": self.description,
            "due_date": self.due_date.isoformat(),
            "priority": self.priority,
            "is_completed": self.is_completed,
            "completed_at": format_ts(self.completed_at) if self.completed_at else None,
            "created_at": format_ts(self.created_at),
        }


@dataclass(frozen=True, slots=True)
class OverdueReminder:
    """One overdue task joined with its owner's contact info."""

    task_id: int
    user_id: int
    username: str
    email: str
    title: str
    description: str
    due_date: date
