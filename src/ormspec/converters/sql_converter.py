"""Render introspected tables as SQL DDL.

The converter builds a sqlglot `exp.Create` AST from a `Table` and
serializes it for a target dialect. Types are rebuilt from their canonical
spelling and capacity. Custom types are kept as user-defined types. Text
defaults are stored verbatim by the catalog, so they are parsed back as SQL
expressions in the source dialect.

Example:
    >>> converter = SQLConverter(dialect="postgres")
    >>> print(converter.convert(table))
    CREATE TABLE public.actor (actor_id INT NOT NULL GENERATED BY DEFAULT AS IDENTITY, ...)
"""

from __future__ import annotations

import math
from functools import singledispatchmethod
from typing import Any

from sqlglot import exp, parse_one
from sqlglot.errors import ParseError
from sqlglot.expressions import convert

from ..constraints import (
    AutoIncrementConstraint,
    ColumnConstraint,
    DefaultValueConstraint,
    NotNullConstraint,
)
from ..exceptions import ConversionError
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
from ..spec import Column, ColumnSpecification, Table
from ..types import Custom


class SQLConverter:
    """Convert a `Table` into a `CREATE TABLE` statement.

    Args:
        dialect: Target SQL dialect name accepted by sqlglot.
        source_dialect: Dialect the catalog's default expressions are written
            in. Defaults to "postgres".
        **convert_options: Default sqlglot generation options, such as
            `pretty=True`.
    """

    def __init__(
        self,
        dialect: str = "postgres",
        *,
        source_dialect: str = "postgres",
        **convert_options: Any,
    ):
        self._dialect = dialect
        self._source_dialect = source_dialect
        self._convert_options = convert_options
        self._current_column: str | None = None

    def convert(
        self,
        table: Table,
        *,
        if_not_exists: bool = False,
        **kwargs: Any,
    ) -> str:
        """Convert `table` into a SQL DDL string.

        Args:
            table: The introspected table.
            if_not_exists: If True, add an `IF NOT EXISTS` clause.
            **kwargs: sqlglot generation options overriding the defaults.

        Raises:
            ConversionError: If a type or default cannot be represented.
        """
        ast = self.to_ast(table, if_not_exists=if_not_exists)
        options = {**self._convert_options, **kwargs}
        return ast.sql(dialect=self._dialect, **options)

    def to_ast(self, table: Table, *, if_not_exists: bool = False) -> exp.Create:
        """Build the sqlglot `exp.Create` expression for `table`."""
        table_expression = exp.Table(
            this=exp.to_identifier(table.name.name),
            db=exp.to_identifier(table.name.schema) if table.name.schema else None,
        )
        expressions = [self._convert_column(column) for column in table.columns]
        return exp.Create(
            this=exp.Schema(this=table_expression, expressions=expressions),
            kind="TABLE",
            exists=if_not_exists or None,
        )

    def _convert_column(self, column: Column) -> exp.ColumnDef:
        self._current_column = column.name.name
        try:
            constraints = [
                self._convert_column_constraint(c)
                for c in column.specification.constraints
            ]
            return exp.ColumnDef(
                this=exp.to_identifier(column.name.name),
                kind=self._convert_type(column.specification),
                constraints=constraints,
            )
        finally:
            self._current_column = None

    def _convert_type(self, specification: ColumnSpecification) -> exp.DataType:
        if isinstance(specification.sql_type, Custom):
            return _user_defined(specification.sql_type.raw)
        type_str = specification.type_str
        try:
            return exp.DataType.build(type_str, dialect=self._source_dialect)
        except (ParseError, ValueError):
            return _user_defined(type_str)

    # %% ---- Constraints --------------------------------------------------------------
    @singledispatchmethod
    def _convert_column_constraint(
        self, constraint: ColumnConstraint
    ) -> exp.ColumnConstraint:
        raise ConversionError(
            f"SQLConverter does not support constraint: {type(constraint).__name__}"
            f" for column '{self._current_column or '<unknown>'}'."
        )

    @_convert_column_constraint.register(NotNullConstraint)
    def _(self, constraint: NotNullConstraint) -> exp.ColumnConstraint:
        return exp.ColumnConstraint(kind=exp.NotNullColumnConstraint())

    @_convert_column_constraint.register(AutoIncrementConstraint)
    def _(self, constraint: AutoIncrementConstraint) -> exp.ColumnConstraint:
        return exp.ColumnConstraint(
            kind=exp.GeneratedAsIdentityColumnConstraint(this=False)
        )

    @_convert_column_constraint.register(DefaultValueConstraint)
    def _(self, constraint: DefaultValueConstraint) -> exp.ColumnConstraint:
        return exp.ColumnConstraint(
            kind=exp.DefaultColumnConstraint(this=self._convert_literal(constraint.value))
        )

    # %% ---- Literals -----------------------------------------------------------------
    @singledispatchmethod
    def _convert_literal(self, literal: Literal) -> exp.Expression:
        raise ConversionError(
            f"SQLConverter does not support literal: {type(literal).__name__}"
            f" for column '{self._current_column or '<unknown>'}'."
        )

    @_convert_literal.register(NullLiteral)
    def _(self, literal: NullLiteral) -> exp.Expression:
        return exp.Null()

    @_convert_literal.register(BoolLiteral)
    @_convert_literal.register(IntegerLiteral)
    def _(self, literal: BoolLiteral | IntegerLiteral) -> exp.Expression:
        return convert(literal.value)

    @_convert_literal.register(DoubleLiteral)
    def _(self, literal: DoubleLiteral) -> exp.Expression:
        if math.isfinite(literal.value):
            return convert(literal.value)
        # NaN and infinities only exist as string casts
        if math.isnan(literal.value):
            text = "NaN"
        else:
            text = "Infinity" if literal.value > 0 else "-Infinity"
        return exp.cast(exp.Literal.string(text), exp.DataType.build("double"))

    @_convert_literal.register(UuidLiteral)
    def _(self, literal: UuidLiteral) -> exp.Expression:
        return exp.Literal.string(str(literal.value))

    @_convert_literal.register(StringLiteral)
    def _(self, literal: StringLiteral) -> exp.Expression:
        try:
            return parse_one(literal.value, read=self._source_dialect)
        except ParseError as exc:
            raise ConversionError(
                f"Could not parse default '{literal.value}'"
                f" for column '{self._current_column or '<unknown>'}': {exc}"
            ) from exc

    @_convert_literal.register(CurrentTimestamp)
    def _(self, literal: CurrentTimestamp) -> exp.Expression:
        return exp.CurrentTimestamp()

    @_convert_literal.register(CurrentDate)
    def _(self, literal: CurrentDate) -> exp.Expression:
        return exp.CurrentDate()

    @_convert_literal.register(UuidGenerateV4)
    def _(self, literal: UuidGenerateV4) -> exp.Expression:
        return exp.Anonymous(this="uuid_generate_v4", expressions=[])


def _user_defined(type_str: str) -> exp.DataType:
    return exp.DataType(this=exp.DataType.Type.USERDEFINED, kind=type_str)
