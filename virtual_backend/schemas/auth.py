"""Auth schemas."""

from __future__ import annotations

from pydantic import BaseModel, EmailStr

from virtual_backend.schemas.user import User


class Credentials(BaseModel):
    email: EmailStr
    password: str


class SessionRecord(BaseModel):
    access_token: str
    user_id: str
    expires_at: int  # unix seconds


class SessionResponse(SessionRecord):
    token_type: str = "bearer"
    expires_in: int
    user: User


class AuthData(BaseModel):
    user: User | None = None
    session: SessionResponse | None = None
