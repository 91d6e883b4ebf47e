# src/productivity_tracker/accounts/credentials.py

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash


class WerkzeugPasswordHasher:
    """PasswordHasher backed by werkzeug's salted hash helpers."""

    def __init__(self, method: str = "pbkdf2:sha256") -> None:
        self._method = method

    def hash(self, plaintext: str) -> str:
        return generate_password_hash(plaintext, method=self._method)

    def verify(self, plaintext: str, hashed: str) -> bool:
        if not hashed:
            return False
        return check_password_hash(hashed, plaintext)
