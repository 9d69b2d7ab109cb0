"""Moderation action schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from virtual_backend.schemas.common import Timestamp


class Moderacion(BaseModel):
    id: str
    denuncia_id: str
    admin_id: str
    accion: str
    comentario: str | None = None
    fecha: Timestamp

    model_config = ConfigDict(extra="forbid", validate_assignment=True)


class ModeracionCreate(BaseModel):
    """Insert draft. ``admin_id`` is filled with the caller when omitted."""

    id: str | None = None
    denuncia_id: str
    admin_id: str
    accion: str = Field(min_length=1)
    comentario: str | None = None
    fecha: Timestamp | None = None

    model_config = ConfigDict(extra="forbid")
