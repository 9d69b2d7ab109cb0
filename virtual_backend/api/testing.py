"""Test isolation API."""

from fastapi import APIRouter, Depends

from virtual_backend.api.deps import get_dispatcher
from virtual_backend.api.responses import envelope_response
from virtual_backend.services.dispatcher import Dispatcher

router = APIRouter(prefix="/testing", tags=["testing"])


@router.post("/reset")
def reset(dispatcher: Dispatcher = Depends(get_dispatcher)):
    """Restore the seed tables and drop all sessions."""
    return envelope_response(dispatcher.reset())
