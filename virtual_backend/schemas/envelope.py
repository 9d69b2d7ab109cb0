"""Response envelope schemas."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from virtual_backend.core.errors import BackendError


class ErrorDetail(BaseModel):
    message: str
    code: str


class Envelope(BaseModel):
    """``{data, error, count}`` returned for every engine call.

    ``status_code`` is the conceptual transport status; it is not part of the
    serialized body.
    """

    data: Any = None
    error: ErrorDetail | None = None
    count: int | None = None
    status_code: int = Field(default=200, exclude=True)

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, exc: BackendError) -> "Envelope":
        return cls(
            data=None,
            error=ErrorDetail(message=exc.message, code=exc.code),
            status_code=exc.status_code,
        )
