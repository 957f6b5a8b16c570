"""Name -> schema registry used by search profiles."""

from __future__ import annotations

from typing import Any

from sqlalchemy import MetaData

from FuzzyCast.schema.reflect import SchemaMetadata, resolve_schema
from FuzzyCast.utils.log import log


class SchemaRegistry:
    """Registry of searchable schemas keyed by name.

    Filled once at start-up, read-only afterwards.
    """

    def __init__(self) -> None:
        self._schemas: dict[str, SchemaMetadata] = {}

    @classmethod
    def from_metadata(cls, metadata: MetaData) -> SchemaRegistry:
        """Register every table of ``metadata`` under its table name."""
        registry = cls()
        for table in metadata.sorted_tables:
            registry.register(table.name, table)
        return registry

    @classmethod
    def from_base(cls, base: Any) -> SchemaRegistry:
        """Register every mapped class of a declarative base under its table name.

        Inheriting mappers are skipped; the root class of a hierarchy owns the name.
        """
        registry = cls()
        mappers = sorted(base.registry.mappers, key=lambda m: m.local_table.name)
        for mapper in mappers:
            if mapper.inherits is not None:
                continue
            registry.register(mapper.local_table.name, mapper.class_)
        return registry

    def register(self, name: str, source: Any) -> SchemaMetadata:
        """Register ``source`` under ``name``.

        Args:
            name: Registry key, referenced by ``search.profiles.<name>.schema``.
            source: Mapped class, ``Table`` or ``SchemaMetadata``.

        Returns:
            The reflected schema.

        Raises:
            ValueError: If ``name`` is empty or already registered.
        """
        key = name.strip()
        if not key:
            raise ValueError("Schema name must not be empty")
        if key in self._schemas:
            raise ValueError(f"Schema already registered: {key}")
        schema = resolve_schema(source)
        self._schemas[key] = schema
        log.debug("Registered schema name=%s fields=%s", key, schema.fields())
        return schema

    def resolve(self, name: str) -> SchemaMetadata:
        """Return the schema registered under ``name``.

        Raises:
            ValueError: If ``name`` is not registered.
        """
        schema = self._schemas.get(name)
        if schema is None:
            raise ValueError(f"Unknown schema: {name}")
        return schema

    def names(self) -> tuple[str, ...]:
        """Return registered names in registration order."""
        return tuple(self._schemas.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._schemas
