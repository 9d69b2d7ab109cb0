"""Deterministic seed data."""

from __future__ import annotations

from datetime import datetime, timezone
from functools import lru_cache

from pydantic import BaseModel

from virtual_backend.core.config import settings
from virtual_backend.core.security import hash_password
from virtual_backend.schemas.comentario import Comentario
from virtual_backend.schemas.denuncia import Denuncia
from virtual_backend.schemas.like import Like
from virtual_backend.schemas.user import UserRecord

SEED_TIMESTAMP = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

USER_1_ID = "user-1"
USER_2_ID = "user-2"
ADMIN_ID = "admin-1"
DENUNCIA_1_ID = "denuncia-1"
DENUNCIA_2_ID = "denuncia-2"


@lru_cache(maxsize=1)
def _seed_password_hash() -> str:
    # Hashed once per process so every reset yields identical rows.
    return hash_password(settings.seed_password)


def build_seed() -> dict[str, list[BaseModel]]:
    """Return fresh table contents: 3 users, 2 reports, 2 comments, 1 like."""
    now = SEED_TIMESTAMP
    password_hash = _seed_password_hash()
    return {
        "users": [
            UserRecord(
                id=USER_1_ID,
                email="user@example.com",
                name="Usuario Uno",
                role="user",
                created_at=now,
                password_hash=password_hash,
            ),
            UserRecord(
                id=USER_2_ID,
                email="maria@example.com",
                name="María",
                role="user",
                created_at=now,
                password_hash=password_hash,
            ),
            UserRecord(
                id=ADMIN_ID,
                email="admin@example.com",
                name="Administrador",
                role="admin",
                created_at=now,
                password_hash=password_hash,
            ),
        ],
        "denuncias": [
            Denuncia(
                id=DENUNCIA_1_ID,
                user_id=USER_1_ID,
                nombre_asociado="Empresa XYZ",
                mail_asociado="contacto@xyz.com",
                descripcion="Incumplimiento de contrato en la entrega de servicios.",
                estado="activa",
                likes_count=1,
                comentarios_count=1,
                created_at=now,
                updated_at=now,
            ),
            Denuncia(
                id=DENUNCIA_2_ID,
                user_id=USER_2_ID,
                nombre_asociado="Juan Pérez",
                mail_asociado=None,
                descripcion="Estafa en compraventa de vehículo usado.",
                estado="en revisión",
                likes_count=0,
                comentarios_count=1,
                created_at=now,
                updated_at=now,
            ),
        ],
        "comentarios": [
            Comentario(
                id="comentario-1",
                denuncia_id=DENUNCIA_1_ID,
                user_id=USER_2_ID,
                contenido="Tuve una experiencia similar con esta empresa.",
                created_at=now,
            ),
            Comentario(
                id="comentario-2",
                denuncia_id=DENUNCIA_2_ID,
                user_id=USER_1_ID,
                contenido="Gracias por compartir la información.",
                created_at=now,
            ),
        ],
        "likes": [
            Like(
                id="like-1",
                denuncia_id=DENUNCIA_1_ID,
                user_id=USER_2_ID,
                created_at=now,
            ),
        ],
        "moderaciones": [],
    }
