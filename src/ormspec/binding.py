"""Binding of domain types to table and column names.

Code generation layers bind a domain class to the table it is stored in
without requiring an annotation: by convention the table name is the class
name lowercased, with no schema and no alias. A class can override the
convention with the `table` decorator or by defining a `to_table_name`
classmethod.

Example:
    >>> @dataclass
    ... class Actor:
    ...     actor_id: int
    ...     first_name: str
    >>> table_name_of(Actor)
    TableName(name='actor', qualifier=None, alias=None)
    >>> [c.name for c in column_names_of(Actor)]
    ['actor_id', 'first_name']
"""

from __future__ import annotations

import dataclasses
from typing import Any, Callable, Protocol, TypeVar, runtime_checkable

from .names import ColumnName, TableName

T = TypeVar("T", bound=type)

_TABLE_NAME_ATTR = "__table_name__"


@runtime_checkable
class ToTableName(Protocol):
    """Types that know which table they are stored in."""

    @classmethod
    def to_table_name(cls) -> TableName: ...


def table_name_of(cls: type) -> TableName:
    """Return the table bound to `cls`.

    Explicit bindings win over the naming convention, in this order: a
    `to_table_name` classmethod, then a binding made with `table`.
    """
    if isinstance(cls, type) and issubclass(cls, ToTableName):
        return cls.to_table_name()
    bound = cls.__dict__.get(_TABLE_NAME_ATTR)
    if isinstance(bound, TableName):
        return bound
    return TableName(name=cls.__name__.lower())


def table(name: str | None = None, *, schema: str | None = None) -> Callable[[T], T]:
    """Class decorator binding a class to an explicit table.

    Args:
        name: Table name. Defaults to the class name lowercased. A dotted
            `schema.table` form is accepted when `schema` is not given.
        schema: Optional schema qualifier.
    """

    def decorator(cls: T) -> T:
        if name is not None and schema is None:
            table_name = TableName.parse(name)
        else:
            table_name = TableName(name=name or cls.__name__.lower(), qualifier=schema)
        setattr(cls, _TABLE_NAME_ATTR, table_name)
        return cls

    return decorator


def column_names_of(cls: Any) -> list[ColumnName]:
    """Return the column names of a dataclass, qualified by its table."""
    if not dataclasses.is_dataclass(cls):
        raise TypeError(f"{cls!r} is not a dataclass.")
    table_name = table_name_of(cls if isinstance(cls, type) else type(cls))
    return [
        ColumnName(name=f.name, qualifier=table_name.name)
        for f in dataclasses.fields(cls)
    ]
