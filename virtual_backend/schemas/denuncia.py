"""Report (denuncia) schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from virtual_backend.schemas.common import Timestamp

Estado = Literal["activa", "en revisión", "resuelta"]


class Denuncia(BaseModel):
    id: str
    user_id: str
    nombre_asociado: str
    mail_asociado: str | None = None
    descripcion: str
    estado: Estado = "activa"
    likes_count: int = 0
    comentarios_count: int = 0
    created_at: Timestamp
    updated_at: Timestamp

    model_config = ConfigDict(extra="forbid", validate_assignment=True)


class DenunciaCreate(BaseModel):
    """Insert draft. Counters are accepted but always recomputed."""

    id: str | None = None
    user_id: str
    nombre_asociado: str = Field(min_length=1)
    mail_asociado: str | None = None
    descripcion: str = Field(min_length=1)
    estado: Estado = "activa"
    likes_count: int | None = None
    comentarios_count: int | None = None
    created_at: Timestamp | None = None
    updated_at: Timestamp | None = None

    model_config = ConfigDict(extra="forbid")


class DenunciaUpdate(BaseModel):
    """Partial update. Only fields present in the payload are merged."""

    nombre_asociado: str | None = Field(default=None, min_length=1)
    mail_asociado: str | None = None
    descripcion: str | None = Field(default=None, min_length=1)
    estado: Estado | None = None
    updated_at: Timestamp | None = None

    model_config = ConfigDict(extra="forbid")
