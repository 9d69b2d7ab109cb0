"""Like schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from virtual_backend.schemas.common import Timestamp


class Like(BaseModel):
    id: str
    denuncia_id: str
    user_id: str
    created_at: Timestamp

    model_config = ConfigDict(extra="forbid", validate_assignment=True)


class LikeCreate(BaseModel):
    id: str | None = None
    denuncia_id: str
    user_id: str
    created_at: Timestamp | None = None

    model_config = ConfigDict(extra="forbid")
