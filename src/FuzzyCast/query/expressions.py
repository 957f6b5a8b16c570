"""SQLAlchemy primitives used by the expression builder.

Every function returns a new statement; ``Select.where`` is generative, so a
statement passed in by the caller is never modified.
"""

from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import Select, or_, select
from sqlalchemy.sql.elements import ColumnElement

from FuzzyCast.schema.reflect import SchemaMetadata


def select_all(schema: SchemaMetadata) -> Select:
    """Return a statement over every record of ``schema``."""
    return select(schema.source)


def has_filters(query: Select) -> bool:
    """Return True if ``query`` already carries a WHERE condition."""
    return query.whereclause is not None


def contains_ignore_case(column: ColumnElement, value: str) -> ColumnElement[bool]:
    """Case-insensitive substring match: ``column ILIKE '%value%'``."""
    return column.ilike(f"%{value}%")


def equals(column: ColumnElement, value: Any) -> ColumnElement[bool]:
    return column == value


def and_group(query: Select, predicates: Sequence[ColumnElement[bool]]) -> Select:
    """AND one disjunction group of predicates onto ``query``.

    On a statement without filters the group becomes the whole WHERE clause.
    """
    if not predicates:
        return query
    return query.where(or_(*predicates))
