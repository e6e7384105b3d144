"""Qualified identifiers for tables and columns.

A qualified name is an identifier optionally prefixed by its container:
`schema.table` for tables and `table.column` for columns. Names are parsed
from their dotted textual form and rendered back with `complete_name()`.

Example:
    >>> TableName.parse("public.actor").schema
    'public'
    >>> ColumnName.parse("actor.first_name").complete_name()
    'actor.first_name'
    >>> ColumnName.parse("first_name").table is None
    True
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeVar

from .exceptions import MalformedCatalogDataError

NameT = TypeVar("NameT", bound="QualifiedName")


@dataclass(frozen=True)
class QualifiedName:
    """An identifier with an optional qualifier and alias.

    Args:
        name: The unqualified identifier.
        qualifier: The containing object (schema or table), if any.
        alias: Optional alias used when the name appears in a query.
    """

    name: str
    qualifier: str | None = None
    alias: str | None = None

    @classmethod
    def parse(cls: type[NameT], raw: str) -> NameT:
        """Parse a dotted identifier.

        A string without `.` is taken whole as the unqualified name. A string
        with `.` must split into exactly two non-empty parts.

        Raises:
            MalformedCatalogDataError: If the string has more than two parts
                or an empty part.
        """
        if "." not in raw:
            return cls(name=raw)
        parts = raw.split(".")
        if len(parts) != 2 or not all(parts):
            raise MalformedCatalogDataError(
                f"Qualified name '{raw}' must have exactly two non-empty parts, "
                f"found {len(parts)}."
            )
        qualifier, name = parts
        return cls(name=name, qualifier=qualifier)

    def complete_name(self) -> str:
        """Return `qualifier.name`, or just `name` when unqualified."""
        if self.qualifier:
            return f"{self.qualifier}.{self.name}"
        return self.name

    def __str__(self) -> str:
        return self.complete_name()


@dataclass(frozen=True)
class TableName(QualifiedName):
    """A table name qualified by its schema."""

    @property
    def schema(self) -> str | None:
        return self.qualifier


@dataclass(frozen=True)
class ColumnName(QualifiedName):
    """A column name qualified by its table."""

    @property
    def table(self) -> str | None:
        return self.qualifier
