"""Custom ormspec exceptions and warnings."""

from __future__ import annotations

import warnings


class OrmspecError(Exception):
    """Base exception for all ormspec-related errors.

    This is the root exception that all other ormspec exceptions inherit from.
    It provides enhanced error reporting with suggestions for resolution.

    Attributes:
        suggestions: List of suggested fixes or actions.

    Example:
        >>> raise OrmspecError(
        ...     "Could not resolve column 'actor_id' of table 'actor'",
        ...     suggestions=["Check the table schema", "Verify the column exists"]
        ... )
    """

    def __init__(
        self,
        message: str,
        suggestions: list[str] | None = None,
    ):
        """Initialize an OrmspecError.

        Args:
            message: The error message.
            suggestions: Optional list of suggestions to fix the error.
        """
        super().__init__(message)
        self.suggestions = suggestions or []

    def __str__(self) -> str:
        result = super().__str__()

        if self.suggestions:
            suggestions_text = "; ".join(self.suggestions)
            result += f" | {suggestions_text}"

        return result


class ConfigError(OrmspecError):
    """Invalid introspector configuration.

    Raised when configuration values are out of range, of the wrong type,
    or when a configuration file contains unknown keys.
    """


# Introspection Exceptions
class IntrospectionError(OrmspecError):
    """Base for all errors raised while introspecting a table.

    Any introspection error aborts the whole table: no partial column list
    is ever returned alongside it.
    """


class CatalogQueryError(IntrospectionError):
    """A catalog query failed or returned an unexpected result.

    Raised when the database driver raises while executing a catalog query,
    or when the rows returned do not match the expected shape or count.
    The original driver exception, if any, is chained as `__cause__`.
    """


class MalformedCatalogDataError(IntrospectionError, ValueError):
    """Raw catalog text violates an assumed grammar.

    Raised for a non-integer capacity clause, a default expression that
    cannot be parsed for the column's resolved type, or a qualified name
    with more than two segments.
    """


class UnsupportedTypeCategoryError(IntrospectionError):
    """A resolved type has no rule for interpreting its default expression."""


class UnknownTypeError(IntrospectionError):
    """Unknown base type spelling.

    Raised only in "raise" mode. In "coerce" mode the type degrades to
    `Custom` with a `ValidationWarning` instead.
    """


# Converter Exceptions
class ConversionError(OrmspecError):
    """Errors while rendering introspected tables to a target format."""


# Warnings
class ValidationWarning(UserWarning):
    """Warning category emitted for recoverable degradations."""


def validation_warning(
    message: str,
    *,
    filename: str | None = None,
    module: str | None = None,
    stacklevel: int = 3,
) -> None:
    """Emit a `ValidationWarning`.

    Args:
        message: Warning text.
        filename: Optional logical source for the warning, prefixed to the
            message as `[filename]`.
        module: Optional module name, used when no filename is given.
        stacklevel: Passed through to `warnings.warn`.
    """
    source = filename or module
    text = f"[{source}] {message}" if source else message
    warnings.warn(text, category=ValidationWarning, stacklevel=stacklevel)
