"""Moderation vocabulary."""

from __future__ import annotations

# Report states, in workflow order
ESTADOS = ("activa", "en revisión", "resuelta")

# Moderation action -> resulting report state
ACCION_ESTADO = {
    "Aprobada": "activa",
    "En revisión": "en revisión",
    "Resuelta": "resuelta",
}


def is_moderation_accion(accion: str) -> bool:
    """Return True if ``accion`` is a supported moderation action."""
    return accion in ACCION_ESTADO


def map_accion_to_estado(accion: str) -> str:
    """Map a moderation action to the report state it produces."""
    if not is_moderation_accion(accion):
        raise ValueError(f"Unknown moderation action: {accion}")
    return ACCION_ESTADO[accion]
