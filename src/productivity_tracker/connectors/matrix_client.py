# src/productivity_tracker/connectors/matrix_client.py

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from nio import AsyncClient, AsyncClientConfig, LoginResponse

logger = logging.getLogger(__name__)


def _session_path(store_dir: Path) -> Path:
    return store_dir / "session.json"


def _read_session(path: Path) -> dict[str, Any] | None:
    try:
        data = json.loads(path.read_text("utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Cannot read Matrix session %s: %r", path, e)
        return None
    if not isinstance(data, dict):
        return None
    if not all(data.get(k) for k in ("access_token", "user_id", "device_id")):
        logger.warning("Matrix session %s is missing required fields", path)
        return None
    return data


def _write_session(path: Path, data: dict[str, Any]) -> None:
    tmp = path.with_suffix(".tmp")
    tmp.write_text(json.dumps(data, ensure_ascii=False), "utf-8")
    os.replace(tmp, path)
    try:
        os.chmod(path, 0o600)
    except OSError:
        pass


async def create_matrix_client(settings) -> AsyncClient | None:
    """
    Build a send-only Matrix client for reminders.

    Reuses <matrix_store_path>/session.json when present; otherwise logs in
    with the configured password once and saves the session (access token,
    device id) under the gitignored data dir. Returns None when Matrix is not
    configured or login fails.
    """
    homeserver = (getattr(settings, "matrix_homeserver", "") or "").strip()
    user_id = (getattr(settings, "matrix_user_id", "") or "").strip()
    password = (getattr(settings, "matrix_password", "") or "").strip()
    store_dir = Path(getattr(settings, "matrix_store_path", Path(".local/tracker/matrix_store")))

    if not homeserver or not user_id:
        logger.error("Matrix is not configured: set TRACKER_MATRIX_HOMESERVER and TRACKER_MATRIX_USER_ID")
        return None

    store_dir.mkdir(parents=True, exist_ok=True)
    session_file = _session_path(store_dir)

    client = AsyncClient(
        homeserver,
        user_id,
        config=AsyncClientConfig(encryption_enabled=False, store_sync_tokens=False),
    )

    session = _read_session(session_file) if session_file.exists() else None
    if session is not None:
        client.access_token = str(session["access_token"])
        client.user_id = str(session["user_id"])
        client.device_id = str(session["device_id"])
        logger.info("Matrix session restored for %s", client.user_id)
        return client

    if not password:
        logger.error(
            "Matrix session.json not found and password is not set. "
            "Set TRACKER_MATRIX_PASSWORD once to bootstrap a session."
        )
        await client.close()
        return None

    device_name = f"{getattr(settings, 'app_name', 'tracker')} reminders"
    resp = await client.login(password=password, device_name=device_name)
    if not isinstance(resp, LoginResponse):
        logger.error("Matrix login failed: %r", resp)
        await client.close()
        return None

    try:
        _write_session(
            session_file,
            {"access_token": resp.access_token, "user_id": resp.user_id, "device_id": resp.device_id},
        )
        logger.info("Matrix session saved to %s (user=%s)", session_file, resp.user_id)
    except OSError:
        logger.exception("Failed to write Matrix session %s; continuing with in-memory session", session_file)

    return client
