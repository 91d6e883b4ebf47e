# src/productivity_tracker/reminders/overdue_scanner.py

from __future__ import annotations

"""
Overdue scanner.

A small polling loop that, on every sweep:
- fetches incomplete tasks due before today, across all owners,
- builds one reminder per task,
- sends it via an injected notification sink.

The scanner never writes to the task store. A task that stays overdue is
reminded again on every sweep; the next sweep is the only retry.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime

from ..core.ports import NotificationSink, TaskRepo
from ..tasks.task_models import OverdueReminder

logger = logging.getLogger(__name__)

REMINDER_SUBJECT = "Task Reminder: Overdue Task"
NO_DESCRIPTION = "No description"


@dataclass(slots=True, frozen=True)
class SweepResult:
    found: int
    sent: int
    failed: int


def build_reminder_message(reminder: OverdueReminder) -> tuple[str, str]:
    """Return (subject, body) for one overdue task."""
    description = reminder.description.strip() or NO_DESCRIPTION
    body = (
        f"Hello {reminder.username},\n"
        "\n"
        "You have an overdue task that needs your attention:\n"
        "\n"
        f"  {reminder.title}\n"
        f"  Description: {description}\n"
        f"  Due Date: {reminder.due_date.isoformat()}\n"
        "\n"
        "Please complete this task as soon as possible to stay on track with your productivity goals!\n"
        "\n"
        "Best regards,\n"
        "Smart Productivity Tracker\n"
    )
    return REMINDER_SUBJECT, body


async def sweep_overdue_tasks(
        task_store: TaskRepo,
        sink: NotificationSink,
        *,
        as_of: date,
) -> SweepResult:
    """
    Send one reminder per overdue task.

    A failed delivery is logged and counted; the remaining reminders are still
    attempted. A failing store query propagates to the caller.
    """
    reminders = task_store.list_overdue_reminders(as_of)
    sent = 0
    failed = 0

    for reminder in reminders:
        subject, body = build_reminder_message(reminder)
        try:
            await sink.send(recipient=reminder.email, subject=subject, body=body)
        except Exception:
            failed += 1
            logger.exception(
                "Reminder delivery failed task_id=%s recipient=%s",
                reminder.task_id,
                reminder.email,
            )
            continue

        sent += 1
        logger.info("Reminder sent to %s for task_id=%s", reminder.email, reminder.task_id)

    result = SweepResult(found=len(reminders), sent=sent, failed=failed)
    logger.info(
        "Overdue sweep as_of=%s found=%d sent=%d failed=%d",
        as_of,
        result.found,
        result.sent,
        result.failed,
    )
    return result


def _utc_today() -> date:
    return datetime.now(UTC).date()


async def run_overdue_scanner(
        task_store: TaskRepo,
        sink: NotificationSink,
        *,
        interval_seconds: float = 3600.0,
        today: Callable[[], date] = _utc_today,
) -> None:
    """
    Sweep every interval_seconds, starting immediately.

    A sweep that fails as a whole (e.g. the database is locked) is logged and
    the loop keeps going. To stop the scanner, cancel the coroutine/task.
    """
    sleep_s = max(0.5, float(interval_seconds))
    logger.info("Overdue scanner started (interval=%.0fs)", sleep_s)

    while True:
        try:
            await sweep_overdue_tasks(task_store, sink, as_of=today())
        except Exception:
            logger.exception("Overdue sweep failed")

        await asyncio.sleep(sleep_s)
