"""Request dispatcher: the only entry point into the store.

Every call resolves the caller from its bearer token, applies the policy
engine and only then runs the executor. Failures come back as values in the
response envelope; nothing raised by the services escapes this module.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable

from pydantic import BaseModel, ValidationError

from virtual_backend.core.config import settings
from virtual_backend.core.errors import BackendError, InvalidRequest, UnknownOperation, describe_validation_error
from virtual_backend.db.store import Store
from virtual_backend.schemas.auth import AuthData, Credentials, SessionRecord, SessionResponse
from virtual_backend.schemas.envelope import Envelope
from virtual_backend.schemas.request import (
    OPERATIONS,
    DeleteRequest,
    InsertRequest,
    SelectRequest,
    UpdateRequest,
    operation_adapter,
)
from virtual_backend.schemas.user import UserRecord
from virtual_backend.services.auth_service import SessionManager
from virtual_backend.services.policy_service import PolicyEngine
from virtual_backend.services.query_executor import QueryExecutor, utcnow

logger = logging.getLogger(__name__)

REQUEST_TYPES = (SelectRequest, InsertRequest, UpdateRequest, DeleteRequest)


class Dispatcher:
    """Owns one store and the services bound to it.

    Independent instances never share state, so tests can build as many as
    they need instead of resetting a shared one.
    """

    def __init__(self, store: Store | None = None, clock: Callable[[], datetime] = utcnow) -> None:
        self.store = store if store is not None else Store()
        self.executor = QueryExecutor(self.store, clock=clock)
        self.sessions = SessionManager(self.store, clock=clock)
        self.policy = PolicyEngine(self.executor)

    # --- Data operations ------------------------------------------------------------

    def dispatch(self, payload: dict[str, Any] | BaseModel, token: str | None = None) -> Envelope:
        """Run one operation request on behalf of the bearer of ``token``."""
        try:
            operation = self._operation_tag(payload)
            user = self.sessions.require_user(token)
            request = self.parse(payload)
            request = self._apply_defaults(user, request)
            self.policy.authorize(user, request)
            result = self.executor.run(request)
        except BackendError as exc:
            logger.info("Rejected request (%s): %s", exc.code, exc.message)
            return Envelope.failure(exc)
        if operation != "select":
            logger.debug("%s on %s by user=%s", operation, request.table, user.id)
        return Envelope(data=result.data, count=result.count)

    def parse(self, payload: dict[str, Any] | BaseModel) -> BaseModel:
        """Validate a raw payload into a typed operation request."""
        if isinstance(payload, REQUEST_TYPES):
            return payload
        if not isinstance(payload, dict):
            raise InvalidRequest("Request body must be an object")
        try:
            return operation_adapter.validate_python(payload)
        except ValidationError as exc:
            raise InvalidRequest(describe_validation_error(exc)) from exc

    # --- Auth -----------------------------------------------------------------------

    def sign_up(self, email: str, password: str) -> Envelope:
        try:
            creds = self._credentials(email, password)
            user, session = self.sessions.sign_up(creds.email, creds.password)
        except BackendError as exc:
            return Envelope.failure(exc)
        return Envelope(data=self._auth_data(user, session))

    def sign_in(self, email: str, password: str) -> Envelope:
        try:
            creds = self._credentials(email, password)
            user, session = self.sessions.sign_in(creds.email, creds.password)
        except BackendError as exc:
            return Envelope.failure(exc)
        return Envelope(data=self._auth_data(user, session))

    def sign_out(self, token: str | None) -> Envelope:
        self.sessions.sign_out(token)
        return Envelope(data=None)

    def reset(self) -> Envelope:
        """Restore the seed tables and drop every session."""
        self.store.reset()
        self.sessions.reset()
        return Envelope(data={"ok": True})

    # --- Internal -------------------------------------------------------------------

    def _operation_tag(self, payload: dict[str, Any] | BaseModel) -> str:
        if isinstance(payload, REQUEST_TYPES):
            return payload.operation
        operation = payload.get("operation") if isinstance(payload, dict) else None
        if operation not in OPERATIONS:
            raise UnknownOperation()
        return operation

    def _apply_defaults(self, user: UserRecord, request: BaseModel) -> BaseModel:
        if isinstance(request, InsertRequest) and request.table == "moderaciones":
            values = [{"admin_id": user.id, **draft} for draft in request.values]
            return request.model_copy(update={"values": values})
        return request

    def _credentials(self, email: str, password: str) -> Credentials:
        try:
            return Credentials(email=email, password=password)
        except ValidationError as exc:
            raise InvalidRequest(describe_validation_error(exc)) from exc

    def _auth_data(self, user: UserRecord, session: SessionRecord) -> dict[str, Any]:
        public = user.public()
        response = SessionResponse(
            **session.model_dump(),
            expires_in=settings.session_expire_minutes * 60,
            user=public,
        )
        return AuthData(user=public, session=response).model_dump()
