"""Health check endpoint."""

from fastapi import APIRouter, Depends

from virtual_backend.api.deps import get_dispatcher
from virtual_backend.services.dispatcher import Dispatcher

router = APIRouter(tags=["health"])


@router.get("/health")
def health(dispatcher: Dispatcher = Depends(get_dispatcher)) -> dict:
    """Liveness plus the number of open sessions."""
    return {"status": "ok", "sessions": dispatcher.sessions.active_sessions}
