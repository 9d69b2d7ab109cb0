"""Operation request schemas accepted by the dispatcher."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

TableName = Literal["denuncias", "comentarios", "likes", "moderaciones", "users"]

OPERATIONS = ("select", "insert", "update", "delete")
MUTATING_OPERATIONS = ("insert", "update", "delete")


class EqFilter(BaseModel):
    type: Literal["eq"]
    column: str
    value: Any = None

    model_config = ConfigDict(extra="forbid")


class InFilter(BaseModel):
    type: Literal["in"]
    column: str
    values: list[Any]

    model_config = ConfigDict(extra="forbid")


# Unrecognized predicate kinds fail validation, so they never reach a table.
Filter = Annotated[Union[EqFilter, InFilter], Field(discriminator="type")]


class Order(BaseModel):
    column: str
    ascending: bool = True

    model_config = ConfigDict(extra="forbid")


class SelectOptions(BaseModel):
    count: Literal["exact"] | None = None

    model_config = ConfigDict(extra="forbid")


class SelectRequest(BaseModel):
    operation: Literal["select"] = "select"
    table: TableName
    filters: list[Filter] = Field(default_factory=list)
    order: Order | None = None
    columns: str = "*"
    single: bool = False
    maybe_single: bool = Field(default=False, alias="maybeSingle")
    options: SelectOptions | None = None

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class InsertRequest(BaseModel):
    operation: Literal["insert"] = "insert"
    table: TableName
    values: list[dict[str, Any]]

    model_config = ConfigDict(extra="forbid")

    @field_validator("values", mode="before")
    @classmethod
    def wrap_single_draft(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return [v]
        return v


class UpdateRequest(BaseModel):
    operation: Literal["update"] = "update"
    table: TableName
    filters: list[Filter] = Field(default_factory=list)
    order: Order | None = None
    values: dict[str, Any]

    model_config = ConfigDict(extra="forbid")


class DeleteRequest(BaseModel):
    operation: Literal["delete"] = "delete"
    table: TableName
    filters: list[Filter] = Field(default_factory=list)
    order: Order | None = None

    model_config = ConfigDict(extra="forbid")


OperationRequest = Annotated[
    Union[SelectRequest, InsertRequest, UpdateRequest, DeleteRequest],
    Field(discriminator="operation"),
]

operation_adapter: TypeAdapter = TypeAdapter(OperationRequest)
