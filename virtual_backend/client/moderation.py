"""Moderation flow built on the client."""

from __future__ import annotations

from virtual_backend.client.client import VirtualClient
from virtual_backend.core.errors import NotFound
from virtual_backend.core.moderation import map_accion_to_estado
from virtual_backend.schemas.envelope import Envelope


async def moderate_denuncia(
    client: VirtualClient,
    denuncia_id: str,
    accion: str,
    comentario: str | None = None,
) -> Envelope:
    """Apply ``accion`` to a report and record it.

    Updates the report's estado, then inserts the moderation action. Stops at
    the first failed step and returns its envelope.
    """
    estado = map_accion_to_estado(accion)
    updated = await client.from_("denuncias").update({"estado": estado}).eq("id", denuncia_id).execute()
    if not updated.ok:
        return updated
    if not updated.data:
        return Envelope.failure(NotFound(f"Denuncia {denuncia_id} not found"))
    return await client.from_("moderaciones").insert(
        {
            "denuncia_id": denuncia_id,
            "admin_id": client.user_id,
            "accion": accion,
            "comentario": comentario or None,
        }
    ).execute()
