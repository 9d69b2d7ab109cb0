"""User schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

from virtual_backend.schemas.common import Timestamp

Role = Literal["user", "admin"]


class User(BaseModel):
    """Public view of a user row."""

    id: str
    email: str
    name: str
    role: Role = "user"
    rut: str | None = None
    created_at: Timestamp

    model_config = ConfigDict(extra="forbid", validate_assignment=True)


class UserRecord(User):
    """Stored user row. The password hash never leaves the store."""

    password_hash: str

    def public(self) -> User:
        return User(**self.model_dump(exclude={"password_hash"}))
