"""Derive column constraints from a catalog row."""

from __future__ import annotations

from ..constraints import (
    AutoIncrementConstraint,
    ColumnConstraint,
    DefaultValueConstraint,
    NotNullConstraint,
)
from ..types import ColumnType
from .literal_parser import parse_literal

SEQUENCE_PREFIX = "nextval"


def is_sequence_default(default: str) -> bool:
    """Return True if `default` draws from a sequence generator."""
    return default.startswith(SEQUENCE_PREFIX)


def derive_constraints(
    sql_type: ColumnType,
    not_null: bool,
    default: str | None,
) -> list[ColumnConstraint]:
    """Build the ordered constraint list of a column.

    `NotNullConstraint` comes first when `not_null` is set. A default
    expression then adds either an `AutoIncrementConstraint` (for sequence
    defaults) or a `DefaultValueConstraint`, never both.

    Raises:
        MalformedCatalogDataError: If the default cannot be read for `sql_type`.
        UnsupportedTypeCategoryError: If `sql_type` has no literal rule.

    Example:
        >>> derive_constraints(SqlType.INT, True, "nextval('actor_id_seq'::regclass)")
        [NotNullConstraint(), AutoIncrementConstraint()]
    """
    constraints: list[ColumnConstraint] = []
    if not_null:
        constraints.append(NotNullConstraint())
    if default is None:
        return constraints

    if is_sequence_default(default):
        constraints.append(AutoIncrementConstraint())
    else:
        constraints.append(DefaultValueConstraint(parse_literal(sql_type, default)))
    return constraints
