from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Sequence

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.types import TypeEngine

    from FuzzyCast.schema.reflect import SchemaMetadata


@dataclass(frozen=True, slots=True)
class FieldCast:
    """A search term successfully coerced into one field's type.

    Attributes:
        field: Field name on the schema.
        value: Typed value produced by the cast.
        type: Declared SQLAlchemy type of the field.
    """

    field: str
    value: Any
    type: TypeEngine


@dataclass(frozen=True, slots=True)
class CastRejection:
    """A (term, field) pair that contributes nothing to the search."""

    field: str
    term: str
    reason: str


@dataclass(frozen=True, slots=True)
class CompositionRequest:
    """Normalized input of one composition call.

    Attributes:
        schema: Reflected record schema being searched.
        terms: Search terms, already converted to text.
        fields: Optional allowlist of field names in caller order.
        base_query: Optional statement to merge into. When absent, the
            pipeline starts from every record of ``schema``.
    """

    schema: SchemaMetadata
    terms: tuple[str, ...]
    fields: tuple[str, ...] | None = None
    base_query: Select | None = None


@dataclass(frozen=True, slots=True)
class FuzzyCast:
    """Record carried through the composition pipeline.

    Every stage returns a new record with one more attribute filled in, so a
    built ``FuzzyCast`` can be inspected stage by stage or fed back into
    ``compose`` to run the pipeline again.
    """

    request: CompositionRequest
    base_query: Select | None = None
    fields: tuple[str, ...] = ()
    field_casts: tuple[FieldCast, ...] = ()
    search_query: Select | None = None

    @property
    def schema(self) -> SchemaMetadata:
        return self.request.schema

    @property
    def terms(self) -> tuple[str, ...]:
        return self.request.terms


def normalize_terms(terms: Any) -> tuple[str, ...]:
    """Normalize caller input into a tuple of text terms.

    Any iterable other than text (list, tuple, set, generator) is expanded
    in iteration order, a single text or scalar value becomes a one-element
    tuple, and ``None`` or a mapping becomes empty. Every term goes through
    ``str()``, so ``42`` searches as ``"42"``.
    """
    if terms is None or isinstance(terms, Mapping):
        return ()
    if isinstance(terms, bytes):
        return (terms.decode("utf-8", errors="replace"),)
    if isinstance(terms, str) or not isinstance(terms, Iterable):
        return (str(terms),)
    return tuple(str(term) for term in terms if term is not None)


def normalize_fields(fields: Sequence[Any] | None) -> tuple[str, ...] | None:
    """Normalize a field allowlist into field names.

    Entries may be names or column attributes (their ``key`` is used).
    """
    if fields is None:
        return None
    if isinstance(fields, str):
        fields = (fields,)
    names: list[str] = []
    for item in fields:
        key = getattr(item, "key", None)
        names.append(key if isinstance(key, str) else str(item))
    return tuple(names)
