"""Envelope -> HTTP response."""

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from virtual_backend.schemas.envelope import Envelope


def envelope_response(envelope: Envelope) -> JSONResponse:
    """Serialize an envelope with its mapped status code."""
    return JSONResponse(status_code=envelope.status_code, content=jsonable_encoder(envelope))
