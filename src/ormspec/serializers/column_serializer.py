"""Serialize introspected columns and tables to plain dictionaries."""

from __future__ import annotations

from collections.abc import Sequence
from functools import singledispatchmethod
from typing import Any

import yaml

from ..constraints import (
    AutoIncrementConstraint,
    ColumnConstraint,
    DefaultValueConstraint,
    NotNullConstraint,
)
from ..exceptions import ConversionError
from ..literals import (
    BoolLiteral,
    CurrentDate,
    CurrentTimestamp,
    DoubleLiteral,
    IntegerLiteral,
    Literal,
    NullLiteral,
    StringLiteral,
    UuidGenerateV4,
    UuidLiteral,
)
from ..spec import Column, ColumnSpecification, Table
from ..types import Capacity, Custom, Limit, Range


class ColumnSerializer:
    """Serialize `Column` records.

    Example:
        >>> ColumnSerializer().serialize(column)
        {'name': 'rental_rate', 'type': 'numeric',
         'capacity': {'precision': 4, 'scale': 2},
         'constraints': {'not_null': True, 'default': {'kind': 'double', 'value': 4.99}}}
    """

    def serialize(self, column: Column) -> dict[str, Any]:
        payload: dict[str, Any] = {"name": column.name.complete_name()}
        payload.update(self.serialize_specification(column.specification))
        if column.comment:
            payload["comment"] = column.comment
        return payload

    def serialize_specification(
        self, specification: ColumnSpecification
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if isinstance(specification.sql_type, Custom):
            payload["type"] = "custom"
            payload["raw_type"] = specification.sql_type.raw
        else:
            payload["type"] = specification.sql_type.value
        if specification.capacity is not None:
            payload["capacity"] = self.serialize_capacity(specification.capacity)
        constraints = self.serialize_constraints(specification.constraints)
        if constraints:
            payload["constraints"] = constraints
        return payload

    def serialize_capacity(self, capacity: Capacity) -> dict[str, int]:
        if isinstance(capacity, Limit):
            return {"limit": capacity.limit}
        if isinstance(capacity, Range):
            return {"precision": capacity.precision, "scale": capacity.scale}
        raise ConversionError(f"Unknown capacity: {capacity!r}.")

    def serialize_constraints(
        self, constraints: Sequence[ColumnConstraint]
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        for constraint in constraints:
            payload.update(self._serialize_constraint(constraint))
        return payload

    @singledispatchmethod
    def _serialize_constraint(self, constraint: ColumnConstraint) -> dict[str, Any]:
        raise ConversionError(f"Unknown column constraint: {type(constraint).__name__}.")

    @_serialize_constraint.register(NotNullConstraint)
    def _(self, constraint: NotNullConstraint) -> dict[str, Any]:
        return {"not_null": True}

    @_serialize_constraint.register(AutoIncrementConstraint)
    def _(self, constraint: AutoIncrementConstraint) -> dict[str, Any]:
        return {"auto_increment": True}

    @_serialize_constraint.register(DefaultValueConstraint)
    def _(self, constraint: DefaultValueConstraint) -> dict[str, Any]:
        return {"default": self.serialize_literal(constraint.value)}

    def serialize_literal(self, literal: Literal) -> dict[str, Any]:
        kind = _LITERAL_KINDS.get(type(literal))
        if kind is None:
            raise ConversionError(f"Unknown literal: {type(literal).__name__}.")
        payload: dict[str, Any] = {"kind": kind}
        if isinstance(literal, UuidLiteral):
            payload["value"] = str(literal.value)
        elif isinstance(
            literal, (BoolLiteral, IntegerLiteral, DoubleLiteral, StringLiteral)
        ):
            payload["value"] = literal.value
        return payload


_LITERAL_KINDS: dict[type[Literal], str] = {
    NullLiteral: "null",
    BoolLiteral: "bool",
    IntegerLiteral: "integer",
    DoubleLiteral: "double",
    StringLiteral: "string",
    UuidLiteral: "uuid",
    CurrentTimestamp: "current_timestamp",
    CurrentDate: "current_date",
    UuidGenerateV4: "uuid_generate_v4",
}


class TableSerializer:
    """Serialize `Table` records, delegating columns to `ColumnSerializer`."""

    def __init__(self, column_serializer: ColumnSerializer | None = None) -> None:
        self._column_serializer = column_serializer or ColumnSerializer()

    def serialize(self, table: Table) -> dict[str, Any]:
        payload: dict[str, Any] = {"name": table.name.complete_name()}
        if table.comment:
            payload["comment"] = table.comment
        payload["columns"] = [self._column_serializer.serialize(c) for c in table.columns]
        return payload


def to_dict(obj: Table | Column | Sequence[Column]) -> Any:
    """Serialize a table, a column, or a column list."""
    if isinstance(obj, Table):
        return TableSerializer().serialize(obj)
    if isinstance(obj, Column):
        return ColumnSerializer().serialize(obj)
    serializer = ColumnSerializer()
    return [serializer.serialize(c) for c in obj]


def to_yaml(obj: Table | Column | Sequence[Column]) -> str:
    """Serialize a table, a column, or a column list to a YAML document."""
    return yaml.safe_dump(to_dict(obj), sort_keys=False, allow_unicode=True)
