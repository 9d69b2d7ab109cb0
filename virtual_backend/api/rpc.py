"""Operation request API."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from virtual_backend.api.deps import get_bearer_token, get_dispatcher
from virtual_backend.api.responses import envelope_response
from virtual_backend.services.dispatcher import Dispatcher

router = APIRouter(tags=["rpc"])


@router.post("/rpc")
def rpc(
    payload: Any = Body(default=None),
    token: str | None = Depends(get_bearer_token),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    """Run one select/insert/update/delete request."""
    return envelope_response(dispatcher.dispatch(payload, token))
