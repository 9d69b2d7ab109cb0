"""Session manager tests."""

from datetime import datetime, timedelta, timezone

import pytest

from virtual_backend.core.errors import AlreadyRegistered, InvalidCredentials, NotAuthenticated
from virtual_backend.core.security import decode_access_token
from virtual_backend.services.auth_service import SessionManager


class Clock:
    def __init__(self):
        self.now = datetime.now(timezone.utc)

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def sessions(store, clock):
    return SessionManager(store, clock=clock)


def test_sign_in_binds_seed_user(sessions):
    user, session = sessions.sign_in("user@example.com", "password")
    assert user.id == "user-1"
    assert session.user_id == "user-1"
    assert sessions.current_user(session.access_token).role == "user"


def test_admin_sign_in_resolves_admin_role(sessions):
    _, session = sessions.sign_in("admin@example.com", "password")
    assert sessions.require_user(session.access_token).role == "admin"


def test_sign_in_failures(sessions):
    with pytest.raises(InvalidCredentials):
        sessions.sign_in("user@example.com", "wrong")
    with pytest.raises(InvalidCredentials):
        sessions.sign_in("nobody@example.com", "password")


def test_sign_in_email_is_case_insensitive(sessions):
    user, _ = sessions.sign_in("User@Example.com", "password")
    assert user.id == "user-1"


def test_sign_up_creates_plain_user(sessions, store):
    user, session = sessions.sign_up("nuevo@example.com", "secret123")
    assert user.role == "user"
    assert user.name == "nuevo"
    assert store.find_user_by_email("nuevo@example.com") is not None
    assert sessions.require_user(session.access_token).id == user.id

    again, _ = sessions.sign_in("nuevo@example.com", "secret123")
    assert again.id == user.id


def test_sign_up_duplicate_email(sessions):
    with pytest.raises(AlreadyRegistered):
        sessions.sign_up("MARIA@example.com", "whatever")


def test_concurrent_sessions_have_distinct_tokens(sessions):
    _, first = sessions.sign_in("user@example.com", "password")
    _, second = sessions.sign_in("user@example.com", "password")
    assert first.access_token != second.access_token
    assert sessions.resolve(first.access_token) is not None
    assert sessions.resolve(second.access_token) is not None
    assert sessions.active_sessions == 2


def test_sign_out(sessions):
    _, session = sessions.sign_in("user@example.com", "password")
    sessions.sign_out(session.access_token)
    assert sessions.resolve(session.access_token) is None
    with pytest.raises(NotAuthenticated):
        sessions.require_user(session.access_token)


def test_sign_out_unknown_token_is_noop(sessions):
    sessions.sign_out("not-a-token")
    sessions.sign_out(None)
    assert sessions.active_sessions == 0


def test_anonymous_tokens(sessions):
    assert sessions.resolve(None) is None
    assert sessions.resolve("garbage") is None
    with pytest.raises(NotAuthenticated):
        sessions.require_user(None)


def test_expired_session_is_dropped(sessions, clock):
    _, session = sessions.sign_in("user@example.com", "password")
    clock.now += timedelta(minutes=61)
    assert sessions.resolve(session.access_token) is None
    assert sessions.active_sessions == 0


def test_token_is_signed_and_bound_to_user(sessions):
    _, session = sessions.sign_in("maria@example.com", "password")
    payload = decode_access_token(session.access_token)
    assert payload["sub"] == "user-2"
    assert payload["exp"] == session.expires_at


def test_reset_drops_sessions(sessions):
    _, session = sessions.sign_in("user@example.com", "password")
    sessions.reset()
    assert sessions.resolve(session.access_token) is None
