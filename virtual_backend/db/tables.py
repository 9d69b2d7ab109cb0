"""Table registry: row, draft and partial-update types per table."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel

from virtual_backend.schemas.comentario import Comentario, ComentarioCreate
from virtual_backend.schemas.denuncia import Denuncia, DenunciaCreate, DenunciaUpdate
from virtual_backend.schemas.like import Like, LikeCreate
from virtual_backend.schemas.moderacion import Moderacion, ModeracionCreate
from virtual_backend.schemas.user import User, UserRecord


@dataclass(frozen=True)
class TableSpec:
    name: str
    row_model: type[BaseModel]
    create_model: type[BaseModel] | None
    update_model: type[BaseModel] | None
    owner_column: str | None = None
    parent_column: str | None = None  # column referencing denuncias.id
    created_column: str = "created_at"
    public_model: type[BaseModel] | None = None

    @property
    def columns(self) -> tuple[str, ...]:
        model = self.public_model or self.row_model
        return tuple(model.model_fields)


TABLES: dict[str, TableSpec] = {
    "denuncias": TableSpec(
        name="denuncias",
        row_model=Denuncia,
        create_model=DenunciaCreate,
        update_model=DenunciaUpdate,
        owner_column="user_id",
    ),
    "comentarios": TableSpec(
        name="comentarios",
        row_model=Comentario,
        create_model=ComentarioCreate,
        update_model=None,
        owner_column="user_id",
        parent_column="denuncia_id",
    ),
    "likes": TableSpec(
        name="likes",
        row_model=Like,
        create_model=LikeCreate,
        update_model=None,
        owner_column="user_id",
        parent_column="denuncia_id",
    ),
    "moderaciones": TableSpec(
        name="moderaciones",
        row_model=Moderacion,
        create_model=ModeracionCreate,
        update_model=None,
        owner_column="admin_id",
        parent_column="denuncia_id",
        created_column="fecha",
    ),
    "users": TableSpec(
        name="users",
        row_model=UserRecord,
        create_model=None,
        update_model=None,
        public_model=User,
    ),
}

# Tables whose rows count towards a report's derived counters
COUNTER_COLUMNS = {
    "likes": "likes_count",
    "comentarios": "comentarios_count",
}
