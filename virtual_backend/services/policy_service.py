"""Per-table authorization rules, evaluated before any mutation.

Rule set:
  - Every authenticated caller may select from every table.
  - denuncias: insert own rows; update own rows, or an admin changing only
    ``estado``; delete own rows, or any row as admin.
  - comentarios, likes: insert own rows; delete only rows the caller owns.
  - moderaciones: insert as admin only.
  - users: seed or sign-up only.
Anything not listed is denied.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel

from virtual_backend.core.errors import Forbidden
from virtual_backend.schemas.request import DeleteRequest, InsertRequest, SelectRequest, UpdateRequest
from virtual_backend.schemas.user import UserRecord
from virtual_backend.services.query_executor import QueryExecutor

logger = logging.getLogger(__name__)

OWNED_INSERT_TABLES = ("denuncias", "comentarios", "likes")
OWNED_DELETE_TABLES = ("comentarios", "likes")

# Fields ignored when deciding whether an update is a pure estado change
BOOKKEEPING_FIELDS = frozenset({"updated_at"})


def is_admin(user: UserRecord) -> bool:
    return user.role == "admin"


class PolicyEngine:
    """Decides whether a caller may run a request. Raises Forbidden on denial."""

    def __init__(self, executor: QueryExecutor) -> None:
        self.executor = executor

    def authorize(self, user: UserRecord, request: BaseModel) -> None:
        if isinstance(request, SelectRequest):
            return
        if isinstance(request, InsertRequest):
            allowed = self.can_insert(user, request.table, request.values)
        elif isinstance(request, UpdateRequest):
            allowed = self.can_update(user, request)
        elif isinstance(request, DeleteRequest):
            allowed = self.can_delete(user, request)
        else:
            allowed = False
        if not allowed:
            logger.warning(
                "Policy denied %s on %s for user=%s",
                getattr(request, "operation", "?"),
                getattr(request, "table", "?"),
                user.id,
            )
            raise Forbidden()

    def can_insert(self, user: UserRecord, table: str, drafts: list[dict[str, Any]]) -> bool:
        if table in OWNED_INSERT_TABLES:
            return all(draft.get("user_id") == user.id for draft in drafts)
        if table == "moderaciones":
            return is_admin(user)
        return False

    def can_update(self, user: UserRecord, request: UpdateRequest) -> bool:
        if request.table != "denuncias":
            return False
        targets = self.executor.match(request.table, request.filters)
        if all(row.user_id == user.id for row in targets):
            return True
        changed = set(request.values) - BOOKKEEPING_FIELDS
        return changed == {"estado"} and is_admin(user)

    def can_delete(self, user: UserRecord, request: DeleteRequest) -> bool:
        if request.table == "denuncias":
            if is_admin(user):
                return True
            targets = self.executor.match(request.table, request.filters)
            return all(row.user_id == user.id for row in targets)
        if request.table in OWNED_DELETE_TABLES:
            targets = self.executor.match(request.table, request.filters)
            return all(row.user_id == user.id for row in targets)
        return False
