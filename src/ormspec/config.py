"""Introspector configuration.

Configuration can be built directly, from a dictionary, or from a YAML file:

    default_schema: sakila
    mode: raise
    type_aliases:
      citext: text
      mpaa_rating: varchar
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import IO, Any, Literal

import yaml

from .exceptions import ConfigError
from .types import SqlType

DEFAULT_SCHEMA = "public"


@dataclass(frozen=True)
class IntrospectorConfig:
    """Configuration for catalog introspectors.

    Args:
        default_schema: Schema used for table names without one. Defaults
            to "public".
        mode: Handling of unknown type spellings. "coerce" keeps them as
            `Custom` types with a warning. "raise" raises `UnknownTypeError`.
            Defaults to "coerce".
        type_aliases: Extra dialect spellings mapped to canonical types,
            merged over the built-in lookup table. Values may be `SqlType`
            members or their string values.
    """

    default_schema: str = DEFAULT_SCHEMA
    mode: Literal["raise", "coerce"] = "coerce"
    type_aliases: Mapping[str, SqlType] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.default_schema, str) or not self.default_schema:
            raise ConfigError("default_schema must be a non-empty string.")
        if self.mode not in {"raise", "coerce"}:
            raise ConfigError("mode must be one of 'raise' or 'coerce'.")
        if not isinstance(self.type_aliases, Mapping):
            raise ConfigError("type_aliases must be a mapping of type names.")

        aliases: dict[str, SqlType] = {}
        for key, value in self.type_aliases.items():
            if not isinstance(key, str) or not key.strip():
                raise ConfigError("type_aliases keys must be non-empty strings.")
            try:
                aliases[key.strip().lower()] = SqlType(value)
            except ValueError as exc:
                valid = ", ".join(t.value for t in SqlType)
                raise ConfigError(
                    f"Unknown canonical type '{value}' for alias '{key}'.",
                    suggestions=[f"Use one of: {valid}"],
                ) from exc
        object.__setattr__(self, "type_aliases", aliases)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> IntrospectorConfig:
        """Build a configuration from a mapping of field names."""
        if not isinstance(data, Mapping):
            raise ConfigError("Introspector configuration must be a mapping.")
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(
                f"Unknown configuration keys: {', '.join(sorted(map(str, unknown)))}."
            )
        return cls(**data)

    @classmethod
    def from_yaml(cls, source: str | Path | IO[str]) -> IntrospectorConfig:
        """Build a configuration from a YAML file path or text stream.

        An empty document yields the default configuration.
        """
        try:
            if isinstance(source, (str, Path)):
                with open(source, encoding="utf-8") as handle:
                    data = yaml.safe_load(handle)
            else:
                data = yaml.safe_load(source)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML configuration: {exc}") from exc
        return cls.from_dict(data or {})
