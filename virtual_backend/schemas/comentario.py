"""Comment schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from virtual_backend.schemas.common import Timestamp


class Comentario(BaseModel):
    id: str
    denuncia_id: str
    user_id: str
    contenido: str
    created_at: Timestamp

    model_config = ConfigDict(extra="forbid", validate_assignment=True)


class ComentarioCreate(BaseModel):
    id: str | None = None
    denuncia_id: str
    user_id: str
    contenido: str = Field(min_length=1)
    created_at: Timestamp | None = None

    model_config = ConfigDict(extra="forbid")
