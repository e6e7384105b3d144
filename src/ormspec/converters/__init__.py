"""Converters from introspected tables to target formats."""

from .sql_converter import SQLConverter

__all__ = ["SQLConverter"]
