# tests/test_auth.py

from __future__ import annotations

import pytest

from productivity_tracker.accounts import auth
from productivity_tracker.core.errors import NotFoundError, ValidationError


def _signup(state, **overrides):
    fields = {
        "username": "carol",
        "email": "Carol@Example.com",
        "password": "secret1",
        "confirm_password": "secret1",
    }
    fields.update(overrides)
    return auth.signup(state, **fields)


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"username": "ab"}, "Username must be at least 3 characters long"),
        ({"username": "ab", "email": "nope"}, "Username must be at least 3 characters long"),
        ({"email": "not-an-email"}, "Please enter a valid email"),
        ({"password": "12345", "confirm_password": "12345"}, "Password must be at least 6 characters long"),
        ({"confirm_password": "secret2"}, "Password confirmation does not match password"),
    ],
)
def test_signup_validation(state, overrides, message) -> None:
    with pytest.raises(ValidationError) as exc:
        _signup(state, **overrides)
    assert str(exc.value) == message
    assert state.users.find_by_email("carol@example.com") is None


def test_signup_stores_hash_and_normalized_email(state) -> None:
    user = _signup(state)

    assert user.email == "carol@example.com"
    assert user.password_hash != "secret1"
    assert state.hasher.verify("secret1", user.password_hash)
    assert user.to_public_dict() == {"id": user.id, "username": "carol", "email": "carol@example.com"}
    assert state.users.get_user(user.id) == user


def test_signup_rejects_duplicate_email(state) -> None:
    _signup(state)
    with pytest.raises(ValidationError, match="User with this email already exists"):
        _signup(state, username="carol2", email="carol@example.com")


def test_login(state) -> None:
    created = _signup(state)

    assert auth.login(state, email="CAROL@example.com", password="secret1").id == created.id

    for email, password in [
        ("carol@example.com", "wrong-pw"),
        ("nobody@example.com", "secret1"),
        ("", "secret1"),
        ("carol@example.com", ""),
    ]:
        with pytest.raises(ValidationError) as exc:
            auth.login(state, email=email, password=password)
        assert str(exc.value) == auth.INVALID_LOGIN


def test_get_unknown_user(state) -> None:
    with pytest.raises(NotFoundError):
        state.users.get_user(999)
