"""HTTP surface of the virtual backend."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from virtual_backend.api import auth, health, rpc, testing
from virtual_backend.core.config import settings
from virtual_backend.services.dispatcher import Dispatcher

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)


def create_app(dispatcher: Dispatcher | None = None) -> FastAPI:
    """Build the app around ``dispatcher`` (a fresh one when omitted)."""
    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
    )
    app.state.dispatcher = dispatcher if dispatcher is not None else Dispatcher()

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(auth.router, prefix=settings.api_prefix)
    app.include_router(rpc.router, prefix=settings.api_prefix)
    app.include_router(testing.router, prefix=settings.api_prefix)
    return app


app = create_app()
