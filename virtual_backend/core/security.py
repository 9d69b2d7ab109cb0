"""Password hashing and session token utilities."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt

from virtual_backend.core.config import settings


def hash_password(password: str) -> str:
    """Hash a plain password."""
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode(), salt).decode()


def verify_password(plain: str, hashed: str) -> bool:
    """Verify a plain password against a hash."""
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def create_access_token(
    subject: str,
    expires_at: datetime,
    issued_at: datetime | None = None,
    extra: dict[str, Any] | None = None,
) -> str:
    """Create a signed access token.

    Every token carries a random ``jti`` so two sessions opened in the same
    second for the same user never share a token.
    """
    payload = {
        "sub": str(subject),
        "exp": expires_at,
        "iat": issued_at or datetime.now(timezone.utc),
        "jti": uuid.uuid4().hex,
    }
    if extra:
        payload.update(extra)
    return jwt.encode(
        payload,
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )


def decode_access_token(token: str, verify_exp: bool = True) -> dict[str, Any] | None:
    """Decode and validate a token. Returns payload or None if invalid.

    With ``verify_exp=False`` only the signature and claims shape are checked;
    the caller then owns the expiry decision.
    """
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"verify_exp": verify_exp},
        )
    except JWTError:
        return None
