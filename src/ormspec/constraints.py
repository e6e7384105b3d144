"""Column constraint definitions.

A column carries zero or more constraints, in order: `NotNullConstraint`
first when the column is not nullable, followed by either an
`AutoIncrementConstraint` or a `DefaultValueConstraint`. A column never has
both of the latter.

Example:
    >>> from ormspec.literals import DoubleLiteral
    >>> [NotNullConstraint(), DefaultValueConstraint(DoubleLiteral(4.99))]
    [NotNullConstraint(), DefaultValueConstraint(value=DoubleLiteral(value=4.99))]
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass

from .literals import Literal

__all__ = [
    "ColumnConstraint",
    "NotNullConstraint",
    "AutoIncrementConstraint",
    "DefaultValueConstraint",
]


class ColumnConstraint(ABC):
    """Abstract base class for column-level constraints."""


@dataclass(frozen=True)
class NotNullConstraint(ColumnConstraint):
    """Constraint requiring that column values cannot be NULL."""

    def __str__(self) -> str:
        return "NotNullConstraint()"


@dataclass(frozen=True)
class AutoIncrementConstraint(ColumnConstraint):
    """Column values are drawn from a sequence generator.

    Detected from a default expression such as `nextval('actor_id_seq'::regclass)`.
    """

    def __str__(self) -> str:
        return "AutoIncrementConstraint()"


@dataclass(frozen=True)
class DefaultValueConstraint(ColumnConstraint):
    """Constraint providing a default value for a column.

    Args:
        value: The canonical literal the default expression resolved to.
    """

    value: Literal

    def __str__(self) -> str:
        return f"DefaultValueConstraint(value={self.value!r})"
