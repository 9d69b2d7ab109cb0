"""Error taxonomy shared by the engine services.

Services raise these exceptions; the dispatcher catches them and returns
them as values in the response envelope.
"""

from __future__ import annotations


class BackendError(Exception):
    """Base class for every failure the engine reports to callers."""

    code = "BackendError"
    status_code = 400
    message = "Backend error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message


class NotAuthenticated(BackendError):
    code = "NotAuthenticated"
    status_code = 401
    message = "Auth session missing"


class Forbidden(BackendError):
    code = "Forbidden"
    status_code = 403
    message = "Operation not permitted"


class NotFound(BackendError):
    code = "NotFound"
    status_code = 200
    message = "No rows found"


class MultipleRowsFound(BackendError):
    code = "MultipleRowsFound"
    status_code = 200
    message = "Multiple rows found"


class AlreadyRegistered(BackendError):
    code = "AlreadyRegistered"
    status_code = 400
    message = "User already registered"


class InvalidCredentials(BackendError):
    code = "InvalidCredentials"
    status_code = 400
    message = "Invalid login credentials"


class UnknownOperation(BackendError):
    code = "UnknownOperation"
    status_code = 400
    message = "Unknown operation"


class InvalidRequest(BackendError):
    """Malformed payload: bad shape, unknown field or column, dangling reference."""

    code = "InvalidRequest"
    status_code = 400
    message = "Invalid request"


def describe_validation_error(exc: Exception) -> str:
    """Render the first pydantic validation error as ``loc: msg``."""
    errors = getattr(exc, "errors", None)
    if not callable(errors):
        return str(exc)
    details = errors()
    if not details:
        return str(exc)
    first = details[0]
    loc = ".".join(str(part) for part in first.get("loc", ()))
    return f"{loc}: {first.get('msg')}" if loc else str(first.get("msg"))
