# src/productivity_tracker/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (stores/hasher/notifier).
"""

from __future__ import annotations

import logging

from ..accounts.credentials import WerkzeugPasswordHasher
from ..accounts.user_store import UserStore
from ..config import get_settings
from ..core.ports import NotificationSink
from ..core.state import AppState
from ..reminders.sinks import LogNotificationSink, SmtpNotificationSink
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)


def create_notifier(settings) -> NotificationSink:
    """
    Pick the reminder backend from settings.

    Matrix needs an async login, so it is attached later by
    attach_matrix_notifier() on the scanner's event loop.
    """
    backend = str(getattr(settings, "notify_backend", "log") or "log").lower()

    if backend == "smtp":
        try:
            return SmtpNotificationSink(
                host=settings.smtp_host,
                port=settings.smtp_port,
                username=settings.smtp_user,
                password=settings.smtp_password,
                sender=settings.smtp_from,
                starttls=settings.smtp_starttls,
            )
        except ValueError:
            logger.error("SMTP reminders requested but TRACKER_SMTP_HOST is empty; logging reminders instead.")

    return LogNotificationSink()


async def attach_matrix_notifier(state: AppState) -> None:
    """Swap the notifier for a Matrix sink when configured (best-effort)."""
    settings = state.settings
    if str(getattr(settings, "notify_backend", "")).lower() != "matrix":
        return

    from ..connectors.matrix_client import create_matrix_client
    from ..reminders.sinks import MatrixNotificationSink

    client = await create_matrix_client(settings)
    if client is None:
        logger.error("Matrix client unavailable; reminders stay on %s.", type(state.notifier).__name__)
        return

    room = getattr(settings, "matrix_reminder_room", "")
    try:
        state.notifier = MatrixNotificationSink(client, room)
    except ValueError:
        logger.error("TRACKER_MATRIX_REMINDER_ROOM is empty; reminders stay on %s.", type(state.notifier).__name__)
        await client.close()
        return
    logger.info("Reminders will be posted to Matrix room %s", room)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    return AppState(
        settings=settings,
        users=UserStore(settings.db_path),
        task_store=TaskStore(settings.db_path),
        hasher=WerkzeugPasswordHasher(),
        notifier=create_notifier(settings),
    )
