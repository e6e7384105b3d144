"""Introspected column and table records.

These records are immutable values produced once per introspection call.
Each call returns a self-contained result owned by the caller.

Example:
    >>> from ormspec.constraints import NotNullConstraint
    >>> from ormspec.names import ColumnName
    >>> from ormspec.types import Limit, SqlType
    >>>
    >>> column = Column(
    ...     name=ColumnName("first_name"),
    ...     specification=ColumnSpecification(
    ...         sql_type=SqlType.VARCHAR,
    ...         capacity=Limit(45),
    ...         constraints=(NotNullConstraint(),),
    ...     ),
    ... )
    >>> column.is_nullable
    False
"""

from __future__ import annotations

import textwrap
from dataclasses import dataclass, field

from .constraints import (
    AutoIncrementConstraint,
    ColumnConstraint,
    DefaultValueConstraint,
    NotNullConstraint,
)
from .literals import Literal
from .names import ColumnName, TableName
from .types import Capacity, ColumnType


@dataclass(frozen=True)
class ColumnSpecification:
    """Type, capacity and constraints of a column, derived from one catalog row.

    Args:
        sql_type: The resolved canonical type.
        capacity: The parenthesized size clause of the raw type, if any.
        constraints: Ordered constraints. `NotNullConstraint` always comes
            first when present.
    """

    sql_type: ColumnType
    capacity: Capacity | None = None
    constraints: tuple[ColumnConstraint, ...] = ()

    def __post_init__(self):
        # Accept any sequence but store a tuple to keep the record immutable.
        object.__setattr__(self, "constraints", tuple(self.constraints))

    @property
    def is_nullable(self) -> bool:
        return not any(isinstance(c, NotNullConstraint) for c in self.constraints)

    @property
    def is_auto_increment(self) -> bool:
        return any(isinstance(c, AutoIncrementConstraint) for c in self.constraints)

    @property
    def default(self) -> Literal | None:
        """The default literal, or None when the column has no default value."""
        for constraint in self.constraints:
            if isinstance(constraint, DefaultValueConstraint):
                return constraint.value
        return None

    @property
    def type_str(self) -> str:
        if self.capacity is None:
            return str(self.sql_type)
        return f"{self.sql_type}({self.capacity})"


@dataclass(frozen=True)
class Column:
    """A table column.

    Args:
        name: The column name.
        specification: Type, capacity and constraints.
        table: The owning table, if known.
        comment: The column comment stored in the catalog.
    """

    name: ColumnName
    specification: ColumnSpecification
    table: TableName | None = None
    comment: str | None = None

    @property
    def is_nullable(self) -> bool:
        return self.specification.is_nullable

    def __str__(self) -> str:
        parts = [f"name={self.name.complete_name()!r}", f"type={self.specification.type_str}"]
        if self.specification.constraints:
            constraints = ", ".join(str(c) for c in self.specification.constraints)
            parts.append(f"constraints=[{constraints}]")
        if self.comment:
            parts.append(f"comment={self.comment!r}")
        return f"Column({', '.join(parts)})"


@dataclass(frozen=True)
class Table:
    """A table and its columns in catalog order.

    Args:
        name: The table name.
        columns: The table's live columns ordered by catalog position.
        comment: The table comment stored in the catalog.
    """

    name: TableName
    columns: tuple[Column, ...] = field(default_factory=tuple)
    comment: str | None = None

    def __post_init__(self):
        object.__setattr__(self, "columns", tuple(self.columns))

    @property
    def column_names(self) -> list[str]:
        return [c.name.name for c in self.columns]

    def get_column(self, name: str) -> Column | None:
        for column in self.columns:
            if column.name.name == name:
                return column
        return None

    def __str__(self) -> str:
        columns = ",\n".join(str(c) for c in self.columns)
        return f"Table(name={self.name.complete_name()!r}, columns=[\n{textwrap.indent(columns, '  ')}\n])"
