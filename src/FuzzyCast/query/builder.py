"""Expression builder.

Folds accepted ``FieldCast`` records into one disjunction group and merges
it into the base statement:

- text fields   -> ``field ILIKE '%value%'``
- other types   -> ``field == value``
- one call      -> ``p1 OR p2 OR ...`` over every term x field
- chained calls -> ``(prior conditions) AND (p1 OR p2 OR ...)``

No casts means no new condition: the base statement comes back unchanged.
"""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import Select
from sqlalchemy.sql.elements import ColumnElement

from FuzzyCast.core.cast import is_text_type
from FuzzyCast.core.models import FieldCast
from FuzzyCast.query.expressions import and_group, contains_ignore_case, equals, has_filters
from FuzzyCast.schema.reflect import SchemaMetadata
from FuzzyCast.utils.log import log


def field_predicate(schema: SchemaMetadata, field_cast: FieldCast) -> ColumnElement[bool]:
    """Build the elementary predicate for one cast."""
    column = schema.column(field_cast.field)
    if is_text_type(field_cast.type):
        return contains_ignore_case(column, field_cast.value)
    return equals(column, field_cast.value)


def build_search_query(
    schema: SchemaMetadata,
    base_query: Select,
    field_casts: Sequence[FieldCast],
) -> Select:
    """Merge the predicates of ``field_casts`` into ``base_query``.

    Args:
        schema: Schema the casts were produced against.
        base_query: Statement to start from. Not modified.
        field_casts: Accepted casts in term-then-field order.

    Returns:
        A new statement, or ``base_query`` itself when there are no casts.
    """
    if not field_casts:
        log.debug("No casts for schema=%s; base query returned unchanged", schema.name)
        return base_query

    predicates = [field_predicate(schema, field_cast) for field_cast in field_casts]
    if has_filters(base_query):
        log.debug("Appending group of %d predicates to filtered query", len(predicates))
    else:
        log.debug("Starting query with group of %d predicates", len(predicates))
    return and_group(base_query, predicates)
