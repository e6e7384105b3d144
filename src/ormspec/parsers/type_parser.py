"""Parse catalog type strings into a canonical type and capacity.

The catalog's type-formatting function prints types such as
`character varying(45)`, `numeric(4,2)` or `integer`. The text before the
first `(` is the base type token. The text between the parentheses is the
capacity clause: `p,s` for a `Range`, a single integer for a `Limit`.

Example:
    >>> parser = TypeParser()
    >>> parser.parse("numeric(4,2)")
    (<SqlType.NUMERIC: 'numeric'>, Range(precision=4, scale=2))
    >>> parser.parse("mpaa_rating")
    (Custom(raw='mpaa_rating'), None)
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Literal

from ..exceptions import MalformedCatalogDataError, UnknownTypeError, validation_warning
from ..types import TYPE_ALIASES, Capacity, ColumnType, Custom, Limit, Range, SqlType

logger = logging.getLogger(__name__)

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


class TypeParser:
    """Resolve raw catalog type strings.

    Args:
        type_aliases: Extra dialect spellings merged over `TYPE_ALIASES`.
            Keys are matched case-insensitively.
        mode: "coerce" resolves unknown spellings to `Custom` with a
            warning. "raise" raises `UnknownTypeError` instead.
    """

    def __init__(
        self,
        type_aliases: Mapping[str, SqlType] | None = None,
        mode: Literal["raise", "coerce"] = "coerce",
    ) -> None:
        self._type_aliases: dict[str, SqlType] = dict(TYPE_ALIASES)
        if type_aliases:
            self._type_aliases.update(
                {key.lower(): value for key, value in type_aliases.items()}
            )
        self.mode = mode

    def parse(self, data_type: str) -> tuple[ColumnType, Capacity | None]:
        """Split `data_type` into its canonical type and optional capacity.

        Raises:
            MalformedCatalogDataError: If the capacity clause is not one
                integer or two comma-separated integers.
            UnknownTypeError: In "raise" mode, for an unknown base type.
        """
        base, clause = split_type(data_type)
        capacity = parse_capacity(clause, data_type) if clause is not None else None
        # "timestamp(6) with time zone" carries part of its name after the clause
        suffix = data_type.partition(f"({clause})")[2].strip() if clause is not None else ""
        if suffix and f"{base} {suffix}".lower() in self._type_aliases:
            base = f"{base} {suffix}"
        sql_type = self.resolve(base, data_type)
        logger.debug(
            "Resolved type %r to %s with capacity %s", data_type, sql_type, capacity
        )
        return sql_type, capacity

    def resolve(self, base: str, data_type: str | None = None) -> ColumnType:
        """Map a base type token to its `SqlType`.

        Args:
            base: The base type token, without capacity clause.
            data_type: The full raw type string kept by `Custom`. Defaults
                to `base`.
        """
        raw = data_type if data_type is not None else base
        sql_type = self._type_aliases.get(base.strip().lower())
        if sql_type is not None:
            return sql_type
        if self.mode == "raise":
            raise UnknownTypeError(
                f"Unknown database type '{raw}'.",
                suggestions=["Register the spelling in 'type_aliases'"],
            )
        validation_warning(
            f"Unknown database type '{raw}' is kept as a custom type.",
            filename=__name__,
        )
        return Custom(raw)


def split_type(data_type: str) -> tuple[str, str | None]:
    """Split a raw type string into its base token and capacity clause.

    Returns the whole string as the base token, and no clause, unless it has
    a `(` followed by a `)`.
    """
    start = data_type.find("(")
    if start == -1:
        return data_type.strip(), None
    end = data_type.find(")", start + 1)
    if end == -1:
        return data_type.strip(), None
    return data_type[:start].strip(), data_type[start + 1 : end]


def parse_capacity(clause: str, data_type: str | None = None) -> Capacity:
    """Parse a capacity clause such as `45` or `4,2`.

    Raises:
        MalformedCatalogDataError: If the clause is not one integer, or two
            integers separated by a comma.
    """
    source = data_type or clause
    if "," in clause:
        parts = clause.split(",")
        if len(parts) != 2:
            raise MalformedCatalogDataError(
                f"Capacity of '{source}' must have exactly two parts, found {len(parts)}."
            )
        precision, scale = (_parse_int(p, source) for p in parts)
        return Range(precision=precision, scale=scale)
    return Limit(_parse_int(clause, source))


def _parse_int(value: str, source: str) -> int:
    text = value.strip()
    if not _INTEGER_RE.fullmatch(text):
        raise MalformedCatalogDataError(
            f"Capacity of '{source}' is not an integer: {value!r}."
        )
    return int(text)
