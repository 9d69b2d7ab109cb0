"""Chainable query builder with deferred, at-most-once execution."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Awaitable

from pydantic import BaseModel

from virtual_backend.schemas.envelope import Envelope
from virtual_backend.schemas.request import (
    DeleteRequest,
    EqFilter,
    InFilter,
    InsertRequest,
    Order,
    SelectOptions,
    SelectRequest,
    UpdateRequest,
)

if TYPE_CHECKING:
    from virtual_backend.client.client import VirtualClient


class QueryBuilder:
    """Accumulates table, operation, filters, order and payload.

    Nothing is sent until ``execute()`` is awaited (``single()`` and
    ``maybe_single()`` execute too). The request goes out once; awaiting
    again returns the settled envelope.
    """

    def __init__(self, client: VirtualClient, table: str) -> None:
        self._client = client
        self.table = table
        self._operation: str | None = None
        self._filters: list[EqFilter | InFilter] = []
        self._order: Order | None = None
        self._columns = "*"
        self._count: str | None = None
        self._values: Any = None
        self._single = False
        self._maybe_single = False
        self._future: asyncio.Future | None = None

    # --- Operations -----------------------------------------------------------------

    def select(self, columns: str = "*", count: str | None = None) -> QueryBuilder:
        self._operation = "select"
        self._columns = columns
        self._count = count
        return self

    def insert(self, values: dict[str, Any] | list[dict[str, Any]]) -> QueryBuilder:
        self._operation = "insert"
        self._values = values if isinstance(values, list) else [values]
        return self

    def update(self, values: dict[str, Any]) -> QueryBuilder:
        self._operation = "update"
        self._values = values
        return self

    def delete(self) -> QueryBuilder:
        self._operation = "delete"
        return self

    # --- Modifiers ------------------------------------------------------------------

    def eq(self, column: str, value: Any) -> QueryBuilder:
        self._filters.append(EqFilter(type="eq", column=column, value=value))
        return self

    def in_(self, column: str, values: list[Any]) -> QueryBuilder:
        self._filters.append(InFilter(type="in", column=column, values=list(values)))
        return self

    def order(self, column: str, ascending: bool = True) -> QueryBuilder:
        self._order = Order(column=column, ascending=ascending)
        return self

    def single(self) -> Awaitable[Envelope]:
        if self._operation != "select":
            raise ValueError("single() can only be used after select()")
        if self.executed:
            raise ValueError("single() cannot change a request that already ran")
        self._single = True
        return self.execute()

    def maybe_single(self) -> Awaitable[Envelope]:
        if self._operation != "select":
            raise ValueError("maybe_single() can only be used after select()")
        if self.executed:
            raise ValueError("maybe_single() cannot change a request that already ran")
        self._maybe_single = True
        return self.execute()

    # --- Execution ------------------------------------------------------------------

    def build(self) -> BaseModel:
        """The typed request this builder describes."""
        if self._operation == "select":
            return SelectRequest(
                table=self.table,
                filters=self._filters,
                order=self._order,
                columns=self._columns,
                single=self._single,
                maybe_single=self._maybe_single,
                options=SelectOptions(count=self._count) if self._count else None,
            )
        if self._operation == "insert":
            return InsertRequest(table=self.table, values=self._values)
        if self._operation == "update":
            if not self._values:
                raise ValueError("update() requires values")
            return UpdateRequest(table=self.table, filters=self._filters, order=self._order, values=self._values)
        if self._operation == "delete":
            return DeleteRequest(table=self.table, filters=self._filters, order=self._order)
        raise ValueError("No operation specified")

    @property
    def executed(self) -> bool:
        return self._future is not None

    async def execute(self) -> Envelope:
        if self._future is None:
            self._future = asyncio.ensure_future(self._client.send(self.build()))
        return await self._future
