# src/productivity_tracker/reminders/sinks.py

from __future__ import annotations

"""
Notification sinks (NotificationSink implementations).

- LogNotificationSink: offline default, writes reminders to the log
- SmtpNotificationSink: plain-text email through an SMTP relay
- MatrixNotificationSink: posts reminders into a Matrix room

Every sink raises NotificationError when a single delivery fails.
"""

import asyncio
import logging
import smtplib
from email.message import EmailMessage
from typing import TYPE_CHECKING, Any

from ..core.errors import NotificationError

if TYPE_CHECKING:
    from nio import AsyncClient

logger = logging.getLogger(__name__)


class LogNotificationSink:
    """Fallback for demos / local runs without a mail or chat server."""

    async def send(self, *, recipient: str, subject: str, body: str) -> None:
        logger.info("[reminder] to=%s subject=%s\n%s", recipient, subject, body)


class SmtpNotificationSink:
    def __init__(
        self,
        *,
        host: str,
        port: int = 587,
        username: str = "",
        password: str = "",
        sender: str = "",
        starttls: bool = True,
        timeout: float = 30.0,
    ) -> None:
        if not host:
            raise ValueError("SMTP host is required")
        self._host = host
        self._port = int(port)
        self._username = username
        self._password = password
        self._sender = sender or username
        self._starttls = starttls
        self._timeout = float(timeout)

    def _build_message(self, recipient: str, subject: str, body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self._sender
        msg["To"] = recipient
        msg["Subject"] = subject
        msg.set_content(body)
        return msg

    def _send_blocking(self, msg: EmailMessage) -> None:
        with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as smtp:
            if self._starttls:
                smtp.starttls()
            if self._username:
                smtp.login(self._username, self._password)
            smtp.send_message(msg)

    async def send(self, *, recipient: str, subject: str, body: str) -> None:
        if not recipient:
            raise NotificationError("reminder has no recipient address")
        msg = self._build_message(recipient, subject, body)
        try:
            await asyncio.to_thread(self._send_blocking, msg)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError(f"SMTP delivery to {recipient} failed: {e}") from e


class MatrixNotificationSink:
    """
    Post reminders into one Matrix room.

    The tracker only knows email addresses, so the recipient is written into
    the message text instead of being used for routing.
    """

    def __init__(self, client: AsyncClient, room_id: str) -> None:
        if not room_id:
            raise ValueError("Matrix reminder room is required")
        self._client = client
        self._room_id = room_id

    @staticmethod
    def _render(recipient: str, subject: str, body: str) -> str:
        return f"{subject} (for {recipient})\n\n{body}".strip()

    async def send(self, *, recipient: str, subject: str, body: str) -> None:
        from nio import RoomSendError

        text = self._render(recipient, subject, body)
        try:
            resp: Any = await self._client.room_send(
                room_id=self._room_id,
                message_type="m.room.message",
                content={"msgtype": "m.text", "body": text},
                ignore_unverified_devices=True,
            )
        except Exception as e:
            raise NotificationError(f"Matrix send to {self._room_id} failed: {e!r}") from e

        if isinstance(resp, RoomSendError):
            raise NotificationError(f"Matrix send to {self._room_id} failed: {resp.message}")

    async def close(self) -> None:
        await self._client.close()
