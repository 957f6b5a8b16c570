"""Expression building on top of SQLAlchemy statements."""

from __future__ import annotations

from FuzzyCast.query.builder import build_search_query, field_predicate

__all__ = ["build_search_query", "field_predicate"]
