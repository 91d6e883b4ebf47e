# src/productivity_tracker/core/state.py

from __future__ import annotations

import asyncio
import threading
from dataclasses import dataclass, field
from typing import Any

from .ports import NotificationSink, PasswordHasher, TaskRepo, UserRepo


@dataclass
class AppState:
    """
    Runtime container shared by connectors, the API facade and the scanner.

    Holds no per-user identity: the acting owner id is always passed
    explicitly into every task/report call.
    """

    settings: Any
    users: UserRepo
    task_store: TaskRepo
    hasher: PasswordHasher
    notifier: NotificationSink

    # Event loop of the background scanner thread (None when not running).
    loop: asyncio.AbstractEventLoop | None = None
    lock: threading.Lock = field(default_factory=threading.Lock)
