# src/productivity_tracker/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time.
- Settings stay injectable: create_initial_state(settings=...) accepts any
  object with the same attributes (tests pass a SimpleNamespace).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "TRACKER"

NOTIFY_BACKENDS = ("log", "smtp", "matrix")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Connectors ----
    console_enabled: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    db_path: Path
    matrix_store_path: Path

    # ---- Overdue scanner ----
    scanner_enabled: bool
    scanner_interval_seconds: float
    notify_backend: str

    # ---- SMTP ----
    smtp_host: str
    smtp_port: int
    smtp_user: str
    smtp_password: str
    smtp_from: str
    smtp_starttls: bool

    # ---- Matrix ----
    matrix_homeserver: str
    matrix_user_id: str
    matrix_password: str
    matrix_reminder_room: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "Productivity Tracker")
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/tracker"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "tracker.sqlite3")
        matrix_store_path = _env_path(_k("MATRIX_STORE_PATH"), data_dir / "matrix_store")

        scanner_enabled = _env_bool(_k("SCANNER_ENABLED"), True)
        scanner_interval_seconds = _env_float(_k("SCANNER_INTERVAL_SECONDS"), 3600.0)

        notify_backend = _env(_k("NOTIFY_BACKEND"), "log").strip().lower()
        if notify_backend not in NOTIFY_BACKENDS:
            notify_backend = "log"

        smtp_user = _env(_k("SMTP_USER"), "").strip()

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            data_dir=data_dir,
            db_path=db_path,
            matrix_store_path=matrix_store_path,
            scanner_enabled=scanner_enabled,
            scanner_interval_seconds=scanner_interval_seconds,
            notify_backend=notify_backend,
            smtp_host=_env(_k("SMTP_HOST"), "").strip(),
            smtp_port=_env_int(_k("SMTP_PORT"), 587),
            smtp_user=smtp_user,
            smtp_password=_env(_k("SMTP_PASSWORD"), ""),
            smtp_from=_env(_k("SMTP_FROM"), smtp_user).strip(),
            smtp_starttls=_env_bool(_k("SMTP_STARTTLS"), True),
            matrix_homeserver=_env(_k("MATRIX_HOMESERVER"), "").strip(),
            matrix_user_id=_env(_k("MATRIX_USER_ID"), "").strip(),
            matrix_password=_env(_k("MATRIX_PASSWORD"), "").strip(),
            matrix_reminder_room=_env(_k("MATRIX_REMINDER_ROOM"), "").strip(),
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
