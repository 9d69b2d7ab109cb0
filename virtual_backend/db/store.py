"""In-memory table store."""

from __future__ import annotations

import logging
from typing import Any, Callable

from pydantic import BaseModel

from virtual_backend.db.seed import build_seed
from virtual_backend.db.tables import TABLES
from virtual_backend.schemas.user import UserRecord

logger = logging.getLogger(__name__)


class Store:
    """Owns the ordered row collections of every table.

    Rows are mutated in place. Callers needing isolation copy what they read;
    the query executor does this for everything it returns.
    """

    def __init__(self, seed: Callable[[], dict[str, list[BaseModel]]] = build_seed) -> None:
        self._seed = seed
        self._tables: dict[str, list[BaseModel]] = {}
        self.reset()

    def reset(self) -> None:
        """Restore the deterministic seed."""
        tables = self._seed()
        self._tables = {name: list(tables.get(name, [])) for name in TABLES}
        logger.info("Store reset: %s", {name: len(rows) for name, rows in self._tables.items()})

    def rows(self, table: str) -> list[BaseModel]:
        """Live row list of a table."""
        return self._tables[table]

    def replace_rows(self, table: str, rows: list[BaseModel]) -> None:
        self._tables[table] = rows

    def get(self, table: str, row_id: str) -> BaseModel | None:
        return next((row for row in self._tables[table] if row.id == row_id), None)

    def find_user_by_email(self, email: str) -> UserRecord | None:
        """Case-insensitive email lookup."""
        needle = email.lower()
        return next((u for u in self._tables["users"] if u.email.lower() == needle), None)

    def find_user_by_id(self, user_id: str) -> UserRecord | None:
        return self.get("users", user_id)

    def snapshot(self) -> dict[str, list[dict[str, Any]]]:
        """Plain-data copy of every table, for inspection and comparison."""
        return {name: [row.model_dump() for row in rows] for name, rows in self._tables.items()}
