"""Async data-access client bound to a dispatcher."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable

from pydantic import BaseModel

from virtual_backend.client.cache import CacheObserver
from virtual_backend.client.query_builder import QueryBuilder
from virtual_backend.schemas.envelope import Envelope
from virtual_backend.schemas.request import MUTATING_OPERATIONS, SelectRequest
from virtual_backend.services.dispatcher import Dispatcher

logger = logging.getLogger(__name__)

AuthListener = Callable[[str, Any], None]


class AuthClient:
    """Sign-in state of one client plus auth change notifications."""

    def __init__(self, client: VirtualClient) -> None:
        self._client = client
        self._listeners: list[AuthListener] = []

    async def sign_in_with_password(self, email: str, password: str) -> Envelope:
        envelope = self._client.dispatcher.sign_in(email, password)
        return self._signed_in(envelope)

    async def sign_up(self, email: str, password: str) -> Envelope:
        envelope = self._client.dispatcher.sign_up(email, password)
        return self._signed_in(envelope)

    async def sign_out(self) -> Envelope:
        session = self._client.session
        if session is None:
            return Envelope(data=None)
        envelope = self._client.dispatcher.sign_out(session["access_token"])
        self._client.session = None
        self._notify("SIGNED_OUT")
        self._client.clear_user_views(session["user_id"])
        return envelope

    async def get_session(self) -> Envelope:
        return Envelope(data={"session": self._client.session})

    def on_auth_state_change(self, callback: AuthListener) -> Callable[[], None]:
        """Subscribe to SIGNED_IN / SIGNED_OUT. Returns the unsubscribe callable."""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _signed_in(self, envelope: Envelope) -> Envelope:
        if envelope.ok:
            self._client.session = envelope.data["session"]
            self._notify("SIGNED_IN")
            self._client.sync_cache()
        return envelope

    def _notify(self, event: str) -> None:
        for listener in list(self._listeners):
            listener(event, self._client.session)


class VirtualClient:
    """Entry point mirroring a remote data client: ``auth`` and ``from_(table)``.

    Every request goes through the dispatcher with the client's bearer token.
    After a successful mutation the client republishes its derived views to
    ``cache`` so a reactive consumer stays consistent without subscriptions.
    """

    def __init__(self, dispatcher: Dispatcher, cache: CacheObserver | None = None) -> None:
        self.dispatcher = dispatcher
        self.cache = cache
        self.session: dict[str, Any] | None = None
        self.auth = AuthClient(self)

    @property
    def access_token(self) -> str | None:
        return self.session["access_token"] if self.session else None

    @property
    def user_id(self) -> str | None:
        return self.session["user_id"] if self.session else None

    def from_(self, table: str) -> QueryBuilder:
        return QueryBuilder(self, table)

    async def send(self, request: BaseModel) -> Envelope:
        """Dispatch one built request. Used by QueryBuilder.execute()."""
        envelope = self.dispatcher.dispatch(request, self.access_token)
        if envelope.ok and request.operation in MUTATING_OPERATIONS:
            self.sync_cache()
        return envelope

    def set_cache(self, cache: CacheObserver | None) -> None:
        self.cache = cache
        self.sync_cache()

    def sync_cache(self) -> None:
        """Republish report list, details, per-report comments/likes and own likes."""
        if self.cache is None or self.access_token is None:
            return
        denuncias = self._read(SelectRequest(table="denuncias"))
        comentarios = self._read(SelectRequest(table="comentarios", columns="*, users(name)"))
        likes = self._read(SelectRequest(table="likes"))
        if denuncias is None or comentarios is None or likes is None:
            return

        comentarios_by = defaultdict(list)
        for comentario in comentarios:
            comentarios_by[comentario["denuncia_id"]].append(comentario)
        likes_by = defaultdict(list)
        for like in likes:
            likes_by[like["denuncia_id"]].append(like)

        self.cache.set_query_data(("denuncias", "list"), denuncias)
        for denuncia in denuncias:
            self.cache.set_query_data(("denuncias", "detail", denuncia["id"]), denuncia)
            self.cache.set_query_data(("comentarios", "byDenuncia", denuncia["id"]), comentarios_by[denuncia["id"]])
            self.cache.set_query_data(("likes", "byDenuncia", denuncia["id"]), likes_by[denuncia["id"]])
        own = [like for like in likes if like["user_id"] == self.user_id]
        self.cache.set_query_data(("likes", "byUser", self.user_id), own)

    def clear_user_views(self, user_id: str) -> None:
        """Empty the per-user views of a user who just signed out."""
        if self.cache is not None:
            self.cache.set_query_data(("likes", "byUser", user_id), [])

    def _read(self, request: SelectRequest) -> list[dict[str, Any]] | None:
        envelope = self.dispatcher.dispatch(request, self.access_token)
        if not envelope.ok:
            logger.warning("Cache sync read failed on %s: %s", request.table, envelope.error.message)
            return None
        return envelope.data
