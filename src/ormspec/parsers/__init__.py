"""Parsers turning raw catalog text into canonical types, literals and constraints."""

from .constraint_parser import derive_constraints, is_sequence_default
from .literal_parser import parse_literal
from .type_parser import TypeParser, parse_capacity, split_type

__all__ = [
    "TypeParser",
    "derive_constraints",
    "is_sequence_default",
    "parse_capacity",
    "parse_literal",
    "split_type",
]
