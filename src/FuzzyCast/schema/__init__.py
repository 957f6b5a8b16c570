"""Schema reflection for FuzzyCast.

Turns SQLAlchemy mapped classes and tables into ``SchemaMetadata`` objects
that expose field names and declared types to the composer.
"""

from __future__ import annotations

from FuzzyCast.schema.reflect import MappedSchema, SchemaMetadata, resolve_schema, schema_from_query
from FuzzyCast.schema.registry import SchemaRegistry

__all__ = [
    "MappedSchema",
    "SchemaMetadata",
    "SchemaRegistry",
    "resolve_schema",
    "schema_from_query",
]
