"""Composing introspective ILIKE searches over SQLAlchemy schemas.

```
compose(User, ["gmail", "yahoo", "bob"])
```

``compose`` returns a ``Select`` and also accepts one, so calls chain:

```
query = compose(select(User), ["gmail", "yahoo"], fields=["email"])
query = compose(query, "m")
session.scalars(query).all()
```

Each call ORs every term against every eligible field; successive calls
are ANDed.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Sequence

from sqlalchemy import Select

from FuzzyCast.core.cast import cast_term
from FuzzyCast.core.models import (
    CompositionRequest,
    FieldCast,
    FuzzyCast,
    normalize_fields,
    normalize_terms,
)
from FuzzyCast.query.builder import build_search_query
from FuzzyCast.query.expressions import select_all
from FuzzyCast.schema.reflect import SchemaMetadata, resolve_schema, schema_from_query
from FuzzyCast.utils.log import log

PROTECTED_FIELD_MARKER = "password"


def compose(
    source: Any,
    terms: Any = None,
    *,
    fields: Sequence[Any] | None = None,
    base_query: Select | None = None,
) -> Select:
    """Compose a fuzzy search onto a schema or an existing statement.

    Args:
        source: A mapped class, ``Table`` or ``SchemaMetadata`` to search
            from scratch; a ``Select`` to search within (its schema is taken
            from the statement); or a built ``FuzzyCast`` to run again.
        terms: One term or a list of terms. Non-text terms are converted
            with ``str()``.
        fields: Optional allowlist of field names.
        base_query: Statement to merge into when ``source`` is a schema.

    Returns:
        A new ``Select``; the input statement is left untouched.

    Raises:
        SchemaResolutionError: If the schema behind ``source`` cannot be
            determined.
        TypeError: If ``base_query`` is given together with a ``Select``.
    """
    if isinstance(source, FuzzyCast):
        return search_query(run_pipeline(source))
    if isinstance(source, Select):
        if base_query is not None:
            raise TypeError("base_query cannot be combined with a Select source")
        return search_query(build(schema_from_query(source), terms, fields=fields, base_query=source))
    return search_query(build(source, terms, fields=fields, base_query=base_query))


def build(
    schema: Any,
    terms: Any = None,
    *,
    fields: Sequence[Any] | None = None,
    base_query: Select | None = None,
) -> FuzzyCast:
    """Run the pipeline and return the full ``FuzzyCast`` record.

    Same inputs as ``compose`` with a schema source; useful to inspect the
    eligible fields and casts behind a statement.
    """
    request = CompositionRequest(
        schema=resolve_schema(schema),
        terms=normalize_terms(terms),
        fields=normalize_fields(fields),
        base_query=base_query,
    )
    return run_pipeline(FuzzyCast(request=request))


def search_query(fuzzycast: FuzzyCast) -> Select:
    """Return the composed statement of a built ``FuzzyCast``."""
    if fuzzycast.search_query is None:
        raise ValueError("FuzzyCast pipeline has not been run")
    return fuzzycast.search_query


def run_pipeline(fuzzycast: FuzzyCast) -> FuzzyCast:
    """Run every stage from the request, discarding earlier results."""
    staged = gen_base_query(fuzzycast)
    staged = query_fields(staged)
    return build_search(staged)


def gen_base_query(fuzzycast: FuzzyCast) -> FuzzyCast:
    request = fuzzycast.request
    base_query = request.base_query if request.base_query is not None else select_all(request.schema)
    return replace(fuzzycast, base_query=base_query)


def query_fields(fuzzycast: FuzzyCast) -> FuzzyCast:
    """Resolve eligible fields and cast every term against them."""
    fields = eligible_fields(fuzzycast.schema, fuzzycast.request.fields)
    field_casts = cast_terms(fuzzycast.schema, fuzzycast.terms, fields)
    log.debug(
        "schema=%s terms=%s fields=%s casts=%d",
        fuzzycast.schema.name,
        fuzzycast.terms,
        fields,
        len(field_casts),
    )
    return replace(fuzzycast, fields=fields, field_casts=field_casts)


def build_search(fuzzycast: FuzzyCast) -> FuzzyCast:
    query = build_search_query(fuzzycast.schema, fuzzycast.base_query, fuzzycast.field_casts)
    return replace(fuzzycast, search_query=query)


def eligible_fields(schema: SchemaMetadata, fields: Sequence[str] | None) -> tuple[str, ...]:
    """Return candidate fields: the allowlist or every schema field, minus protected ones.

    A field whose name contains "password" is never searched, even when it
    is explicitly requested.
    """
    candidates = schema.fields() if fields is None else fields
    return tuple(field for field in candidates if PROTECTED_FIELD_MARKER not in field)


def cast_terms(
    schema: SchemaMetadata,
    terms: Sequence[str],
    fields: Sequence[str],
) -> tuple[FieldCast, ...]:
    """Cast every term against every field, term by term, keeping successes only."""
    casts: list[FieldCast] = []
    for term in terms:
        for field in fields:
            result = cast_term(schema, field, term)
            if isinstance(result, FieldCast):
                casts.append(result)
            else:
                log.debug("Rejected term=%r field=%s: %s", result.term, result.field, result.reason)
    return tuple(casts)
