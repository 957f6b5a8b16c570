"""Profile-based search service."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from sqlalchemy import Select

from FuzzyCast.compose import build, search_query
from FuzzyCast.config.search import SearchProfile
from FuzzyCast.core.models import FuzzyCast
from FuzzyCast.schema.reflect import SchemaMetadata, schema_from_query
from FuzzyCast.schema.registry import SchemaRegistry
from FuzzyCast.utils.log import log


@dataclass(slots=True)
class FuzzySearchService:
    """Composes fuzzy searches for named profiles.

    Each profile binds a registered schema to an optional field allowlist,
    so callers only pass a profile name and terms.
    """

    registry: SchemaRegistry
    profiles: Mapping[str, SearchProfile]

    def __post_init__(self) -> None:
        for profile in self.profiles.values():
            schema = self.registry.resolve(profile.schema)
            if profile.fields is None:
                continue
            known = set(schema.fields())
            unknown = [field for field in profile.fields if field not in known]
            if unknown:
                log.warning("Profile %s lists fields unknown to schema %s: %s", profile.name, profile.schema, unknown)

    def build(self, profile_name: str, terms: Any, *, base_query: Select | None = None) -> FuzzyCast:
        """Run the composition pipeline for ``profile_name``.

        Raises:
            ValueError: If the profile is not configured, or ``base_query``
                selects from a different schema than the profile.
        """
        profile = self.profiles.get(profile_name)
        if profile is None:
            raise ValueError(f"Unknown search profile: {profile_name}")
        schema = self.registry.resolve(profile.schema)
        if base_query is not None and not _same_source(schema_from_query(base_query), schema):
            raise ValueError(f"base_query does not select from schema {profile.schema} of profile {profile_name}")
        return build(schema, terms, fields=profile.fields, base_query=base_query)

    def compose(self, profile_name: str, terms: Any, *, base_query: Select | None = None) -> Select:
        """Compose a fuzzy search statement for ``profile_name``.

        Args:
            profile_name: Name under ``search.profiles``.
            terms: One term or a list of terms.
            base_query: Optional statement to narrow; it must select from the
                profile's schema.

        Returns:
            A new ``Select``.
        """
        fuzzycast = self.build(profile_name, terms, base_query=base_query)
        log.debug("Profile %s produced %d casts", profile_name, len(fuzzycast.field_casts))
        return search_query(fuzzycast)


def _same_source(left: SchemaMetadata, right: SchemaMetadata) -> bool:
    # A mapped class and its Table are the same records.
    return getattr(left.source, "__table__", left.source) is getattr(right.source, "__table__", right.source)
