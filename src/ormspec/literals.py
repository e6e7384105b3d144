"""Canonical default-value literals.

A `Literal` is the typed, canonical form of a column's default expression.
The variant produced for a given default depends on the column's resolved
type; see `ormspec.parsers.literal_parser`.

Example:
    >>> IntegerLiteral(5)
    IntegerLiteral(value=5)
    >>> str(CurrentTimestamp())
    'now()'
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass

__all__ = [
    "Literal",
    "NullLiteral",
    "BoolLiteral",
    "IntegerLiteral",
    "DoubleLiteral",
    "StringLiteral",
    "UuidLiteral",
    "CurrentTimestamp",
    "CurrentDate",
    "UuidGenerateV4",
]


class Literal:
    """Base class for default-value literals."""


@dataclass(frozen=True)
class NullLiteral(Literal):
    def __str__(self) -> str:
        return "null"


@dataclass(frozen=True)
class BoolLiteral(Literal):
    value: bool

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class IntegerLiteral(Literal):
    """A signed 64-bit integer."""

    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class DoubleLiteral(Literal):
    """A double-precision float."""

    value: float

    def __str__(self) -> str:
        return repr(self.value)


@dataclass(frozen=True)
class StringLiteral(Literal):
    """A default kept exactly as the catalog stores it.

    No unquoting or unescaping is applied, so `'active'::character varying`
    stays as is.
    """

    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class UuidLiteral(Literal):
    value: uuid.UUID

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class CurrentTimestamp(Literal):
    def __str__(self) -> str:
        return "now()"


@dataclass(frozen=True)
class CurrentDate(Literal):
    def __str__(self) -> str:
        return "today()"


@dataclass(frozen=True)
class UuidGenerateV4(Literal):
    def __str__(self) -> str:
        return "uuid_generate_v4()"
