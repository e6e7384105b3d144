"""Serializer utilities for converting introspected records to dicts and YAML."""

from .column_serializer import ColumnSerializer, TableSerializer, to_dict, to_yaml

__all__ = [
    "ColumnSerializer",
    "TableSerializer",
    "to_dict",
    "to_yaml",
]
