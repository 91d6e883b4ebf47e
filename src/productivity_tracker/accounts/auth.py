# src/productivity_tracker/accounts/auth.py

from __future__ import annotations

import logging
import re

from ..core.errors import ValidationError
from ..core.state import AppState
from .user_store import User

logger = logging.getLogger(__name__)

MIN_USERNAME_LEN = 3
MIN_PASSWORD_LEN = 6

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

INVALID_LOGIN = "Invalid email or password"


def validate_signup(*, username: str, email: str, password: str, confirm_password: str) -> None:
    """Raise ValidationError with the first failing rule (same order as the signup form)."""
    if len((username or "").strip()) < MIN_USERNAME_LEN:
        raise ValidationError(f"Username must be at least {MIN_USERNAME_LEN} characters long")
    if not _EMAIL_RE.match((email or "").strip()):
        raise ValidationError("Please enter a valid email")
    if len(password or "") < MIN_PASSWORD_LEN:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LEN} characters long")
    if password != confirm_password:
        raise ValidationError("Password confirmation does not match password")


def signup(
    state: AppState,
    *,
    username: str,
    email: str,
    password: str,
    confirm_password: str,
) -> User:
    validate_signup(
        username=username,
        email=email,
        password=password,
        confirm_password=confirm_password,
    )
    password_hash = state.hasher.hash(password)
    return state.users.create_user(username=username, email=email, password_hash=password_hash)


def login(state: AppState, *, email: str, password: str) -> User:
    """Return the user for valid credentials; never reveal which part was wrong."""
    if not (email or "").strip() or not password:
        raise ValidationError(INVALID_LOGIN)

    user = state.users.find_by_email(email)
    if user is None or not state.hasher.verify(password, user.password_hash):
        logger.info("Login failed for email=%s", (email or "").strip().lower())
        raise ValidationError(INVALID_LOGIN)

    logger.info("User %s logged in", user.id)
    return user
