"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from virtual_backend.services.dispatcher import Dispatcher

security = HTTPBearer(auto_error=False)


def get_dispatcher(request: Request) -> Dispatcher:
    """The dispatcher owned by the running app."""
    return request.app.state.dispatcher


def get_bearer_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str | None:
    """Bearer token if present. Anonymous callers get None, not a 401."""
    return credentials.credentials if credentials else None
