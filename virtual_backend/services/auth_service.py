"""Auth service: sign-up, sign-in, sign-out and bearer token resolution."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable

from virtual_backend.core.config import settings
from virtual_backend.core.errors import AlreadyRegistered, InvalidCredentials, NotAuthenticated
from virtual_backend.core.security import create_access_token, decode_access_token, hash_password, verify_password
from virtual_backend.db.store import Store
from virtual_backend.schemas.auth import SessionRecord
from virtual_backend.schemas.user import UserRecord

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def get_user_by_email(store: Store, email: str) -> UserRecord | None:
    """Get user by email."""
    return store.find_user_by_email(email)


def create_user(store: Store, email: str, password: str, created_at: datetime) -> UserRecord:
    """Create a new ``role=user`` account named after the email's local part."""
    user = UserRecord(
        id=str(uuid.uuid4()),
        email=email,
        name=email.split("@")[0],
        role="user",
        rut=None,
        created_at=created_at,
        password_hash=hash_password(password),
    )
    store.rows("users").append(user)
    return user


def authenticate_user(store: Store, email: str, password: str) -> UserRecord | None:
    """Authenticate user by email and password."""
    user = get_user_by_email(store, email)
    if not user or not verify_password(password, user.password_hash):
        return None
    return user


class SessionManager:
    """Issues and resolves bearer sessions bound to store users.

    A token maps to at most one live session. Unknown, expired or missing
    tokens resolve to anonymous; only ``require_user`` turns that into an error.
    """

    def __init__(self, store: Store, clock: Callable[[], datetime] = _utcnow) -> None:
        self.store = store
        self._clock = clock
        self._sessions: dict[str, SessionRecord] = {}

    def reset(self) -> None:
        self._sessions.clear()

    def sign_up(self, email: str, password: str) -> tuple[UserRecord, SessionRecord]:
        if get_user_by_email(self.store, email):
            logger.info("Sign-up rejected, email already registered: %s", email)
            raise AlreadyRegistered()
        user = create_user(self.store, email, password, created_at=self._clock())
        logger.info("User signed up: id=%s", user.id)
        return user, self._open_session(user)

    def sign_in(self, email: str, password: str) -> tuple[UserRecord, SessionRecord]:
        user = authenticate_user(self.store, email, password)
        if not user:
            logger.info("Sign-in failed for %s", email)
            raise InvalidCredentials()
        logger.info("User signed in: id=%s", user.id)
        return user, self._open_session(user)

    def sign_out(self, token: str | None) -> None:
        """Drop the session for ``token``. Unknown tokens are a no-op."""
        if token and self._sessions.pop(token, None):
            logger.info("Session closed")

    def resolve(self, token: str | None) -> SessionRecord | None:
        if not token:
            return None
        session = self._sessions.get(token)
        if session is None:
            return None
        if settings.enforce_session_expiry:
            # expires_at is measured on the session clock; the JWT only proves the signature.
            expired = session.expires_at <= int(self._clock().timestamp())
            if expired or decode_access_token(token, verify_exp=False) is None:
                del self._sessions[token]
                logger.info("Expired session dropped: user=%s", session.user_id)
                return None
        return session

    def current_user(self, token: str | None) -> UserRecord | None:
        session = self.resolve(token)
        if session is None:
            return None
        return self.store.find_user_by_id(session.user_id)

    def require_user(self, token: str | None) -> UserRecord:
        """Require an authenticated user. Raises NotAuthenticated otherwise."""
        user = self.current_user(token)
        if user is None:
            raise NotAuthenticated()
        return user

    @property
    def active_sessions(self) -> int:
        return len(self._sessions)

    def _open_session(self, user: UserRecord) -> SessionRecord:
        issued = self._clock()
        expires = issued + timedelta(minutes=settings.session_expire_minutes)
        token = create_access_token(user.id, expires_at=expires, issued_at=issued, extra={"role": user.role})
        session = SessionRecord(access_token=token, user_id=user.id, expires_at=int(expires.timestamp()))
        self._sessions[token] = session
        return session
