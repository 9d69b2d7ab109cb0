"""User-facing translations of engine error messages."""

from __future__ import annotations

ERROR_MESSAGES = {
    # Auth errors
    "Invalid login credentials": "Credenciales inválidas",
    "already registered": "Este email ya está registrado",
    "Auth session missing": "Debes iniciar sesión para continuar",
    "Token has expired or is invalid": "El token ha expirado",
    # Database errors
    "duplicate key value violates unique constraint": "Este registro ya existe",
    "Operation not permitted": "No tienes permisos para realizar esta acción",
    "No rows found": "No se encontró el registro",
    "Multiple rows found": "Se encontró más de un registro",
    "Unknown operation": "Operación desconocida",
}


def translate_error(message: str) -> str:
    """Exact match first, then the first known fragment contained in ``message``."""
    if message in ERROR_MESSAGES:
        return ERROR_MESSAGES[message]
    for fragment, text in ERROR_MESSAGES.items():
        if fragment in message:
            return text
    return message
