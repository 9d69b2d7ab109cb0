"""Query executor.

Runs select/insert/update/delete against the store: filters, ordering,
column projection, the comment -> author enrichment, cardinality modifiers
and the derived report counters. Everything returned is a fresh copy; no
caller ever holds a live reference into the store.
"""

from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import lru_cache
from typing import Annotated, Any, Callable

from pydantic import BaseModel, TypeAdapter, ValidationError

from virtual_backend.core.errors import (
    InvalidRequest,
    MultipleRowsFound,
    NotFound,
    describe_validation_error,
)
from virtual_backend.db.store import Store
from virtual_backend.db.tables import COUNTER_COLUMNS, TABLES, TableSpec
from virtual_backend.schemas.request import (
    DeleteRequest,
    EqFilter,
    Filter,
    InFilter,
    InsertRequest,
    Order,
    SelectRequest,
    UpdateRequest,
)

logger = logging.getLogger(__name__)

# Child tables removed together with their report
CASCADE_TABLES = ("comentarios", "likes", "moderaciones")

_RELATION_RE = re.compile(r"(\w+)\(([^)]*)\)")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class QueryResult:
    data: Any
    count: int | None = None


class QueryExecutor:
    """Executes typed operation requests against a Store."""

    def __init__(self, store: Store, clock: Callable[[], datetime] = utcnow) -> None:
        self.store = store
        self._clock = clock

    def run(self, request: BaseModel) -> QueryResult:
        """Route a parsed operation request to its handler."""
        if isinstance(request, SelectRequest):
            return self.select(request)
        if isinstance(request, InsertRequest):
            return self.insert(request.table, request.values)
        if isinstance(request, UpdateRequest):
            return self.update(request.table, request.filters, request.values, request.order)
        if isinstance(request, DeleteRequest):
            return self.delete(request.table, request.filters, request.order)
        raise InvalidRequest(f"Unsupported request type: {type(request).__name__}")

    # --- Reads ----------------------------------------------------------------------

    def match(self, table: str, filters: list[Filter]) -> list[BaseModel]:
        """Live rows of ``table`` satisfying every filter, in table order."""
        spec = self._spec(table)
        for f in filters:
            self._check_column(spec, f.column)
        filters = [_coerce(spec, f) for f in filters]
        return [row for row in self.store.rows(table) if all(_matches(row, f) for f in filters)]

    def select(self, request: SelectRequest) -> QueryResult:
        spec = self._spec(request.table)
        columns, with_author = self._parse_columns(spec, request.columns)
        rows = self._order(spec, self.match(request.table, request.filters), request.order)
        data = [self._project(spec, row, columns, with_author) for row in rows]

        if request.single:
            if not data:
                raise NotFound()
            if len(data) > 1:
                raise MultipleRowsFound()
            return QueryResult(data[0])
        if request.maybe_single:
            if len(data) > 1:
                raise MultipleRowsFound()
            return QueryResult(data[0] if data else None)

        count = len(data) if request.options and request.options.count == "exact" else None
        return QueryResult(data, count)

    # --- Writes ---------------------------------------------------------------------

    def insert(self, table: str, drafts: list[dict[str, Any]]) -> QueryResult:
        """Insert one or many drafts. Server assigns id and creation time when absent."""
        spec = self._spec(table)
        if spec.create_model is None:
            raise InvalidRequest(f"Table {table} does not accept inserts")
        if not drafts:
            raise InvalidRequest("No rows to insert")

        now = self._clock()
        rows = [self._build_row(spec, draft, now) for draft in drafts]
        existing = {row.id for row in self.store.rows(table)}
        seen: set[str] = set()
        for row in rows:
            if row.id in existing or row.id in seen:
                raise InvalidRequest("duplicate key value violates unique constraint")
            seen.add(row.id)
            self._check_references(spec, row)

        self.store.rows(table).extend(rows)
        if table == "denuncias":
            for row in rows:
                self.recount(row.id)
        elif table in COUNTER_COLUMNS:
            for parent_id in {getattr(row, spec.parent_column) for row in rows}:
                self.recount(parent_id)

        logger.info("insert %s: %d row(s)", table, len(rows))
        return QueryResult([self._dump(spec, row) for row in rows])

    def update(
        self,
        table: str,
        filters: list[Filter],
        values: dict[str, Any],
        order: Order | None = None,
    ) -> QueryResult:
        """Merge ``values`` into every matching row."""
        spec = self._spec(table)
        changes = self.parse_changes(table, values)
        targets = self.match(table, filters)

        # Validate every merged row before touching any of them.
        for row in targets:
            try:
                spec.row_model.model_validate({**row.model_dump(), **changes})
            except ValidationError as exc:
                raise InvalidRequest(describe_validation_error(exc)) from exc

        now = self._clock()
        for row in targets:
            for key, value in changes.items():
                setattr(row, key, value)
            if table == "denuncias" and "updated_at" not in changes:
                row.updated_at = now

        logger.info("update %s: %d row(s) fields=%s", table, len(targets), sorted(changes))
        return QueryResult([self._dump(spec, row) for row in self._order(spec, targets, order)])

    def delete(self, table: str, filters: list[Filter], order: Order | None = None) -> QueryResult:
        """Remove matching rows and return them."""
        spec = self._spec(table)
        if table == "users":
            raise InvalidRequest("Table users does not support deletes")
        targets = self.match(table, filters)
        doomed = {row.id for row in targets}
        if doomed:
            self.store.replace_rows(table, [row for row in self.store.rows(table) if row.id not in doomed])

        if table == "denuncias":
            for child in CASCADE_TABLES:
                kept = [row for row in self.store.rows(child) if row.denuncia_id not in doomed]
                self.store.replace_rows(child, kept)
        elif table in COUNTER_COLUMNS:
            for parent_id in {getattr(row, spec.parent_column) for row in targets}:
                self.recount(parent_id)

        logger.info("delete %s: %d row(s)", table, len(targets))
        return QueryResult([self._dump(spec, row) for row in self._order(spec, targets, order)])

    def parse_changes(self, table: str, values: dict[str, Any]) -> dict[str, Any]:
        """Validate a partial update against the table's update type."""
        spec = self._spec(table)
        if spec.update_model is None:
            raise InvalidRequest(f"Table {table} does not support updates")
        try:
            parsed = spec.update_model.model_validate(values)
        except ValidationError as exc:
            raise InvalidRequest(describe_validation_error(exc)) from exc
        changes = parsed.model_dump(exclude_unset=True)
        if not changes:
            raise InvalidRequest("No fields to update")
        return changes

    # --- Derived counters -----------------------------------------------------------

    def recount(self, denuncia_id: str) -> None:
        """Recompute likes_count and comentarios_count of one report."""
        denuncia = self.store.get("denuncias", denuncia_id)
        if denuncia is None:
            return
        for child, column in COUNTER_COLUMNS.items():
            total = sum(1 for row in self.store.rows(child) if row.denuncia_id == denuncia_id)
            setattr(denuncia, column, total)

    # --- Internal -------------------------------------------------------------------

    def _spec(self, table: str) -> TableSpec:
        try:
            return TABLES[table]
        except KeyError:
            raise InvalidRequest(f"Unknown table: {table}") from None

    def _check_column(self, spec: TableSpec, column: str) -> None:
        if column not in spec.columns:
            raise InvalidRequest(f"Column {column} does not exist on table {spec.name}")

    def _order(self, spec: TableSpec, rows: list[BaseModel], order: Order | None) -> list[BaseModel]:
        """Stable single-column sort. Nulls first ascending, last descending."""
        if order is None:
            return list(rows)
        self._check_column(spec, order.column)

        def key(row: BaseModel) -> tuple:
            value = getattr(row, order.column)
            return (0,) if value is None else (1, value)

        return sorted(rows, key=key, reverse=not order.ascending)

    def _parse_columns(self, spec: TableSpec, columns: str) -> tuple[list[str] | None, bool]:
        compact = re.sub(r"\s", "", columns or "*")
        with_author = False
        for relation, _ in _RELATION_RE.findall(compact):
            if spec.name == "comentarios" and relation == "users":
                with_author = True
            else:
                raise InvalidRequest(f"Unsupported relation {relation} on table {spec.name}")
        names = [name for name in _RELATION_RE.sub("", compact).split(",") if name]
        if not names or "*" in names:
            return None, with_author
        for name in names:
            self._check_column(spec, name)
        return names, with_author

    def _project(
        self,
        spec: TableSpec,
        row: BaseModel,
        columns: list[str] | None,
        with_author: bool,
    ) -> dict[str, Any]:
        data = self._dump(spec, row)
        if columns is not None:
            data = {name: data[name] for name in columns}
        if with_author:
            author = self.store.find_user_by_id(row.user_id)
            data["users"] = {"name": author.name if author else "Usuario"}
        return data

    def _dump(self, spec: TableSpec, row: BaseModel) -> dict[str, Any]:
        return row.model_dump(include=set(spec.columns))

    def _build_row(self, spec: TableSpec, draft: dict[str, Any], now: datetime) -> BaseModel:
        try:
            values = spec.create_model.model_validate(draft).model_dump()
        except ValidationError as exc:
            raise InvalidRequest(describe_validation_error(exc)) from exc
        values["id"] = values.get("id") or str(uuid.uuid4())
        if values.get(spec.created_column) is None:
            values[spec.created_column] = now
        if spec.name == "denuncias":
            values["updated_at"] = values.get("updated_at") or values["created_at"]
            # Recomputed right after the row lands in the table
            values["likes_count"] = 0
            values["comentarios_count"] = 0
        return spec.row_model.model_validate(values)

    def _check_references(self, spec: TableSpec, row: BaseModel) -> None:
        if spec.parent_column:
            parent_id = getattr(row, spec.parent_column)
            if self.store.get("denuncias", parent_id) is None:
                raise InvalidRequest(f"{spec.parent_column} {parent_id} does not reference an existing denuncia")
        if spec.owner_column:
            user_id = getattr(row, spec.owner_column)
            if self.store.find_user_by_id(user_id) is None:
                raise InvalidRequest(f"{spec.owner_column} {user_id} does not reference an existing user")


def _matches(row: BaseModel, f: Filter) -> bool:
    value = getattr(row, f.column)
    if isinstance(f, EqFilter):
        return value == f.value
    if isinstance(f, InFilter):
        return value in f.values
    raise InvalidRequest(f"Unsupported filter type: {type(f).__name__}")


@lru_cache(maxsize=None)
def _column_adapter(model: type[BaseModel], column: str) -> TypeAdapter:
    field = model.model_fields[column]
    if field.metadata:
        return TypeAdapter(Annotated[(field.annotation, *field.metadata)])
    return TypeAdapter(field.annotation)


def _coerce_value(spec: TableSpec, column: str, value: Any) -> Any:
    # A value the column type cannot hold is kept as given and matches nothing.
    try:
        return _column_adapter(spec.row_model, column).validate_python(value)
    except ValidationError:
        return value


def _coerce(spec: TableSpec, f: Filter) -> Filter:
    """Read JSON filter values (ISO strings for timestamps) as the column's type."""
    if isinstance(f, EqFilter):
        return f.model_copy(update={"value": _coerce_value(spec, f.column, f.value)})
    return f.model_copy(update={"values": [_coerce_value(spec, f.column, v) for v in f.values]})
