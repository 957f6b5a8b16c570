"""Schema reflection over SQLAlchemy mapped classes and tables.

The composer never introspects models directly; it talks to a
``SchemaMetadata`` capability object. ``MappedSchema`` implements it for
SQLAlchemy, other record types can subclass ``SchemaMetadata``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from sqlalchemy import Select, Table, inspect
from sqlalchemy.exc import NoInspectionAvailable
from sqlalchemy.orm import Mapper
from sqlalchemy.sql.elements import ColumnElement
from sqlalchemy.types import TypeEngine

from FuzzyCast.core.errors import SchemaResolutionError


class SchemaMetadata(ABC):
    """Field names and declared types of one record type."""

    name: str

    @property
    @abstractmethod
    def source(self) -> Any:
        """Selectable passed to ``select()`` for "all records"."""

    @abstractmethod
    def fields(self) -> tuple[str, ...]:
        """Return field names in declaration order."""

    @abstractmethod
    def type_of(self, field: str) -> TypeEngine | None:
        """Return the declared type of ``field``, or None if unknown."""

    @abstractmethod
    def column(self, field: str) -> ColumnElement:
        """Return the column expression used to build predicates on ``field``."""


class MappedSchema(SchemaMetadata):
    """``SchemaMetadata`` backed by a mapped class or a ``Table``."""

    def __init__(self, source: Any) -> None:
        if isinstance(source, Table):
            self._source = source
            self._mapper: Mapper | None = None
            self.name = source.name
            return

        try:
            mapper = inspect(source)
        except NoInspectionAvailable as exc:
            raise SchemaResolutionError(f"Not a mapped class or table: {source!r}") from exc
        if not isinstance(mapper, Mapper):
            raise SchemaResolutionError(f"Not a mapped class or table: {source!r}")

        self._source = mapper.class_
        self._mapper = mapper
        self.name = mapper.class_.__name__

    @property
    def source(self) -> Any:
        return self._source

    def fields(self) -> tuple[str, ...]:
        if self._mapper is None:
            return tuple(self._source.columns.keys())
        return tuple(attr.key for attr in self._mapper.column_attrs)

    def type_of(self, field: str) -> TypeEngine | None:
        if self._mapper is None:
            column = self._source.columns.get(field)
            return None if column is None else column.type
        attr = self._mapper.column_attrs.get(field)
        if attr is None:
            return None
        return attr.columns[0].type

    def column(self, field: str) -> ColumnElement:
        if self._mapper is None:
            return self._source.columns[field]
        return self._mapper.column_attrs[field].class_attribute

    def __eq__(self, other: object) -> bool:
        return isinstance(other, MappedSchema) and other._source is self._source

    def __hash__(self) -> int:
        return hash(self._source)

    def __repr__(self) -> str:
        return f"MappedSchema({self.name})"


def resolve_schema(source: Any) -> SchemaMetadata:
    """Return ``SchemaMetadata`` for a schema descriptor.

    Args:
        source: A ``SchemaMetadata``, a mapped class or a ``Table``.

    Raises:
        SchemaResolutionError: If ``source`` is none of the above.
    """
    if isinstance(source, SchemaMetadata):
        return source
    return MappedSchema(source)


def schema_from_query(query: Select) -> SchemaMetadata:
    """Resolve the schema a statement selects from.

    The primary ORM entity wins; a statement over plain tables resolves only
    when it has exactly one FROM table.

    Raises:
        SchemaResolutionError: If no single source can be determined.
    """
    descriptions = query.column_descriptions
    if descriptions and descriptions[0].get("entity") is not None:
        return MappedSchema(descriptions[0]["entity"])

    froms = query.get_final_froms()
    if len(froms) == 1 and isinstance(froms[0], Table):
        return MappedSchema(froms[0])
    raise SchemaResolutionError("Cannot determine the source schema of the query")
