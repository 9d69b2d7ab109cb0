"""Auth API."""

from fastapi import APIRouter, Depends

from virtual_backend.api.deps import get_bearer_token, get_dispatcher
from virtual_backend.api.responses import envelope_response
from virtual_backend.schemas.auth import Credentials
from virtual_backend.services.dispatcher import Dispatcher

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/sign-up")
def sign_up(data: Credentials, dispatcher: Dispatcher = Depends(get_dispatcher)):
    """Register a new user and open a session."""
    return envelope_response(dispatcher.sign_up(data.email, data.password))


@router.post("/sign-in")
def sign_in(data: Credentials, dispatcher: Dispatcher = Depends(get_dispatcher)):
    """Open a new session for existing credentials."""
    return envelope_response(dispatcher.sign_in(data.email, data.password))


@router.post("/sign-out")
def sign_out(
    token: str | None = Depends(get_bearer_token),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    """Close the caller's session. Unknown tokens succeed as a no-op."""
    return envelope_response(dispatcher.sign_out(token))
