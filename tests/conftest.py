# tests/conftest.py

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from productivity_tracker.accounts.credentials import WerkzeugPasswordHasher
from productivity_tracker.accounts.user_store import User, UserStore
from productivity_tracker.core.state import AppState
from productivity_tracker.tasks.task_store import TaskStore

from .fakes import FakeNotificationSink


def ts(year: int, month: int, day: int, hour: int = 12, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=UTC)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="tracker-test",
        data_dir=tmp_path,
        db_path=tmp_path / "tracker.sqlite3",
        scanner_enabled=False,
        scanner_interval_seconds=3600.0,
        notify_backend="log",
    )


@pytest.fixture()
def users(settings: SimpleNamespace) -> UserStore:
    return UserStore(settings.db_path)


@pytest.fixture()
def store(settings: SimpleNamespace, users: UserStore) -> TaskStore:
    return TaskStore(settings.db_path)


@pytest.fixture()
def alice(users: UserStore) -> User:
    return users.create_user(username="alice", email="alice@example.com", password_hash="-")


@pytest.fixture()
def bob(users: UserStore) -> User:
    return users.create_user(username="bob", email="bob@example.com", password_hash="-")


@pytest.fixture()
def notifier() -> FakeNotificationSink:
    return FakeNotificationSink()


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    users: UserStore,
    store: TaskStore,
    notifier: FakeNotificationSink,
) -> AppState:
    """
    AppState wired with a recording notifier.

    NOTE: We keep real SQLite stores here because their correctness is part
    of what we want to test.
    """
    return AppState(
        settings=settings,
        users=users,
        task_store=store,
        hasher=WerkzeugPasswordHasher(method="pbkdf2:sha256:1000"),
        notifier=notifier,
    )
