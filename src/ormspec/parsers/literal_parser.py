"""Parse catalog default expressions into canonical literals.

The interpretation of a default expression depends on the column's resolved
type: `5` is an integer for an `int` column and a string for a `text`
column. Anything that cannot be read unambiguously for its type is rejected.
Nothing is coerced.

Sequence defaults (`nextval(...)`) are not literals. They are turned into an
`AutoIncrementConstraint` by `ormspec.parsers.constraint_parser` before this
module is consulted.
"""

from __future__ import annotations

import math
import re
import uuid

from ..exceptions import MalformedCatalogDataError, UnsupportedTypeCategoryError
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
from ..types import (
    FLOATING_TYPES,
    INTEGER_TYPES,
    TEXT_TYPES,
    TIMESTAMP_TYPES,
    ColumnType,
    Custom,
    SqlType,
)

NULL = "null"
NOW = "now()"
TODAY = "today()"
UUID_GENERATE_V4 = "uuid_generate_v4()"

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)


def parse_literal(sql_type: ColumnType, raw: str) -> Literal:
    """Resolve a raw default expression for a column of type `sql_type`.

    Args:
        sql_type: The column's resolved type.
        raw: The default expression exactly as stored by the catalog.

    Returns:
        The canonical literal.

    Raises:
        MalformedCatalogDataError: If `raw` cannot be read as a value of
            `sql_type`.
        UnsupportedTypeCategoryError: If `sql_type` has no literal rule.

    Example:
        >>> parse_literal(SqlType.INT, "5")
        IntegerLiteral(value=5)
        >>> parse_literal(SqlType.TIMESTAMP, "now()")
        CurrentTimestamp()
        >>> parse_literal(SqlType.VARCHAR, "'active'::character varying")
        StringLiteral(value="'active'::character varying")
    """
    if raw == NULL:
        return NullLiteral()

    if isinstance(sql_type, Custom):
        return StringLiteral(raw)
    if sql_type == SqlType.BOOL:
        return BoolLiteral(_parse_bool(raw))
    if sql_type in INTEGER_TYPES:
        return IntegerLiteral(_parse_int64(raw))
    if sql_type in FLOATING_TYPES:
        return DoubleLiteral(_parse_double(raw))
    if sql_type == SqlType.UUID:
        if raw == UUID_GENERATE_V4:
            return UuidGenerateV4()
        return UuidLiteral(_parse_uuid(raw))
    if sql_type in TIMESTAMP_TYPES:
        if raw == NOW:
            return CurrentTimestamp()
        raise MalformedCatalogDataError(
            f"Unsupported {sql_type} default '{raw}': only '{NOW}' is recognized."
        )
    if sql_type == SqlType.DATE:
        if raw == TODAY:
            return CurrentDate()
        raise MalformedCatalogDataError(
            f"Unsupported date default '{raw}': only '{TODAY}' is recognized."
        )
    if sql_type in TEXT_TYPES:
        return StringLiteral(raw)

    raise UnsupportedTypeCategoryError(
        f"Default values of type '{sql_type}' are not supported: '{raw}'."
    )


def _parse_bool(raw: str) -> bool:
    if raw == "true":
        return True
    if raw == "false":
        return False
    raise MalformedCatalogDataError(f"Invalid boolean default: '{raw}'.")


def _parse_int64(raw: str) -> int:
    if not _INTEGER_RE.fullmatch(raw):
        raise MalformedCatalogDataError(f"Invalid integer default: '{raw}'.")
    value = int(raw)
    if not INT64_MIN <= value <= INT64_MAX:
        raise MalformedCatalogDataError(
            f"Integer default '{raw}' is out of the 64-bit signed range."
        )
    return value


def _parse_double(raw: str) -> float:
    if not _FLOAT_RE.fullmatch(raw):
        raise MalformedCatalogDataError(f"Invalid floating point default: '{raw}'.")
    value = float(raw)
    if math.isinf(value) and "inf" not in raw.lower():
        raise MalformedCatalogDataError(
            f"Floating point default '{raw}' overflows a double."
        )
    return value


def _parse_uuid(raw: str) -> uuid.UUID:
    try:
        return uuid.UUID(raw)
    except ValueError as exc:
        raise MalformedCatalogDataError(f"Invalid uuid default: '{raw}'.") from exc
