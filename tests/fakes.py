# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from productivity_tracker.core.errors import NotificationError, StoreError
from productivity_tracker.tasks.task_models import OverdueReminder


@dataclass(slots=True)
class SentNotification:
    recipient: str
    subject: str
    body: str


@dataclass(slots=True)
class FakeNotificationSink:
    """
    Recording NotificationSink.

    Recipients listed in fail_for raise NotificationError instead of being recorded.
    """

    sent: list[SentNotification] = field(default_factory=list)
    fail_for: set[str] = field(default_factory=set)
    attempts: int = 0
    closed: bool = False

    async def send(self, *, recipient: str, subject: str, body: str) -> None:
        self.attempts += 1
        if recipient in self.fail_for:
            raise NotificationError(f"mailbox unavailable: {recipient}")
        self.sent.append(SentNotification(recipient=recipient, subject=subject, body=body))

    async def close(self) -> None:
        self.closed = True


class FakeReminderRepo:
    """In-memory scanner source: only the read-only overdue query is provided."""

    def __init__(self, reminders: list[OverdueReminder]) -> None:
        self.reminders = list(reminders)
        self.calls: list[date] = []

    def list_overdue_reminders(self, as_of: date) -> list[OverdueReminder]:
        self.calls.append(as_of)
        return [r for r in self.reminders if r.due_date < as_of]


class BrokenTaskRepo:
    """Every call fails like a locked or corrupt database would."""

    def __getattr__(self, name: str):
        def _fail(*args, **kwargs):
            raise StoreError(f"{name}: database disk image is malformed")

        return _fail
