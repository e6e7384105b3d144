"""Canonical column types and capacities.

This module defines the closed set of logical types a column can resolve to,
the `Custom` fallback for spellings that are not recognized, and the
capacity clause attached to a type (a length limit, or a precision/scale
range).

`TYPE_ALIASES` maps dialect spellings of a base type, as printed by the
database catalog, to their canonical `SqlType`.

Example:
    >>> TYPE_ALIASES["character varying"]
    <SqlType.VARCHAR: 'varchar'>
    >>> str(Range(precision=4, scale=2))
    '4,2'
    >>> Custom("mpaa_rating").raw
    'mpaa_rating'
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from .exceptions import MalformedCatalogDataError

__all__ = [
    "SqlType",
    "Custom",
    "ColumnType",
    "Capacity",
    "Limit",
    "Range",
    "TYPE_ALIASES",
    "INTEGER_TYPES",
    "FLOATING_TYPES",
    "TEXT_TYPES",
    "TIMESTAMP_TYPES",
]


class SqlType(str, Enum):
    """Canonical logical column types.

    Member values are the canonical SQL spelling of each type.
    """

    BOOL = "boolean"
    TINYINT = "tinyint"
    SMALLINT = "smallint"
    INT = "int"
    BIGINT = "bigint"
    SMALL_SERIAL = "smallserial"
    SERIAL = "serial"
    BIG_SERIAL = "bigserial"
    REAL = "real"
    FLOAT = "float"
    DOUBLE = "double"
    NUMERIC = "numeric"
    TINYBLOB = "tinyblob"
    MEDIUMBLOB = "mediumblob"
    BLOB = "blob"
    LONGBLOB = "longblob"
    VARBINARY = "varbinary"
    BYTEA = "bytea"
    CHAR = "char"
    VARCHAR = "varchar"
    TINYTEXT = "tinytext"
    MEDIUMTEXT = "mediumtext"
    TEXT = "text"
    TEXT_ARRAY = "text[]"
    JSON = "json"
    JSONB = "jsonb"
    UUID = "uuid"
    DATE = "date"
    TIME = "time"
    TIME_TZ = "timetz"
    TIMESTAMP = "timestamp"
    TIMESTAMP_TZ = "timestamptz"
    INTERVAL = "interval"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Custom:
    """A type spelling that does not map to any `SqlType`.

    Args:
        raw: The full type string as reported by the catalog, including any
            capacity clause.
    """

    raw: str

    def __str__(self) -> str:
        return self.raw


ColumnType = Union[SqlType, Custom]


class Capacity:
    """Base class for a type's declared size constraint."""


@dataclass(frozen=True)
class Limit(Capacity):
    """A single size limit, e.g. the length of `varchar(45)`."""

    limit: int

    def __post_init__(self):
        if isinstance(self.limit, bool) or not isinstance(self.limit, int):
            raise MalformedCatalogDataError(
                f"Limit must be an integer, not {self.limit!r}."
            )

    def __str__(self) -> str:
        return str(self.limit)


@dataclass(frozen=True)
class Range(Capacity):
    """A precision/scale pair, e.g. `numeric(4,2)`."""

    precision: int
    scale: int

    def __post_init__(self):
        for label, value in (("precision", self.precision), ("scale", self.scale)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise MalformedCatalogDataError(
                    f"Range {label} must be an integer, not {value!r}."
                )

    def __str__(self) -> str:
        return f"{self.precision},{self.scale}"


TYPE_ALIASES: dict[str, SqlType] = {
    # Boolean
    "boolean": SqlType.BOOL,
    "bool": SqlType.BOOL,
    # Integers
    "tinyint": SqlType.TINYINT,
    "smallint": SqlType.SMALLINT,
    "year": SqlType.SMALLINT,
    "int": SqlType.INT,
    "integer": SqlType.INT,
    "bigint": SqlType.BIGINT,
    "smallserial": SqlType.SMALL_SERIAL,
    "serial": SqlType.SERIAL,
    "bigserial": SqlType.BIG_SERIAL,
    # Floating and fixed point
    "real": SqlType.REAL,
    "float": SqlType.FLOAT,
    "double": SqlType.DOUBLE,
    "double precision": SqlType.DOUBLE,
    "numeric": SqlType.NUMERIC,
    "decimal": SqlType.NUMERIC,
    # Binary
    "tinyblob": SqlType.TINYBLOB,
    "mediumblob": SqlType.MEDIUMBLOB,
    "blob": SqlType.BLOB,
    "longblob": SqlType.LONGBLOB,
    "varbinary": SqlType.VARBINARY,
    "bytea": SqlType.BYTEA,
    # Character
    "char": SqlType.CHAR,
    "character": SqlType.CHAR,
    "varchar": SqlType.VARCHAR,
    "character varying": SqlType.VARCHAR,
    "tinytext": SqlType.TINYTEXT,
    "mediumtext": SqlType.MEDIUMTEXT,
    "text": SqlType.TEXT,
    "text[]": SqlType.TEXT_ARRAY,
    # Semi-structured
    "json": SqlType.JSON,
    "jsonb": SqlType.JSONB,
    # Identifiers
    "uuid": SqlType.UUID,
    # Date/Time
    "date": SqlType.DATE,
    "time": SqlType.TIME,
    "time without time zone": SqlType.TIME,
    "time with time zone": SqlType.TIME_TZ,
    "timetz": SqlType.TIME_TZ,
    "timestamp": SqlType.TIMESTAMP,
    "timestamp without time zone": SqlType.TIMESTAMP,
    "timestamp with time zone": SqlType.TIMESTAMP_TZ,
    "timestamptz": SqlType.TIMESTAMP_TZ,
    "interval": SqlType.INTERVAL,
}

INTEGER_TYPES = frozenset(
    {SqlType.TINYINT, SqlType.SMALLINT, SqlType.INT, SqlType.BIGINT}
)
FLOATING_TYPES = frozenset({SqlType.FLOAT, SqlType.DOUBLE, SqlType.NUMERIC})
TEXT_TYPES = frozenset(
    {
        SqlType.VARCHAR,
        SqlType.CHAR,
        SqlType.TINYTEXT,
        SqlType.MEDIUMTEXT,
        SqlType.TEXT,
    }
)
TIMESTAMP_TYPES = frozenset({SqlType.TIMESTAMP, SqlType.TIMESTAMP_TZ})
