"""Search domain configuration: named search profiles.

```
search:
  profiles:
    users:
      schema: users
      fields: [email, name]
```

A profile names a registered schema and an optional field allowlist.
Without ``fields`` every non-protected field of the schema is searched.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from FuzzyCast.compose import PROTECTED_FIELD_MARKER
from FuzzyCast.config.common import (
    expect_mapping,
    expect_str,
    expect_str_list,
    get_required_value,
    get_section,
)


@dataclass(frozen=True, slots=True)
class SearchProfile:
    """One named search over a registered schema."""

    name: str
    schema: str
    fields: tuple[str, ...] | None = None


@dataclass(frozen=True, slots=True)
class SearchConfig:
    """Store validated search profiles."""

    profiles: Mapping[str, SearchProfile]


def load_search(raw: Mapping[str, Any]) -> SearchConfig:
    """Load search domain config from raw mapping.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If required keys are missing.
    """
    section = get_section(raw, "search", required=False)
    profiles_obj = section.get("profiles")
    if profiles_obj is None:
        return SearchConfig(profiles={})
    profiles_map = expect_mapping(profiles_obj, "search.profiles")

    profiles: dict[str, SearchProfile] = {}
    for name, value in profiles_map.items():
        if not isinstance(name, str):
            raise TypeError("search.profiles names must be strings")
        profiles[name] = parse_search_profile(name, value, f"search.profiles.{name}")
    return SearchConfig(profiles=profiles)


def check_search(config: SearchConfig) -> None:
    """Validate search domain constraints.

    Raises:
        ValueError: If a profile violates search constraints.
    """
    for name, profile in config.profiles.items():
        config_key = f"search.profiles.{name}"
        if not name.strip():
            raise ValueError("search.profiles names must not be empty")
        if not profile.schema.strip():
            raise ValueError(f"{config_key}.schema must not be empty")
        if profile.fields is None:
            continue
        if not profile.fields:
            raise ValueError(f"{config_key}.fields must include at least one field")
        protected = [field for field in profile.fields if PROTECTED_FIELD_MARKER in field]
        if protected:
            raise ValueError(f"{config_key}.fields cannot include protected fields: {protected}")


def parse_search_profile(name: str, value: Any, config_key: str) -> SearchProfile:
    """Parse one profile mapping into ``SearchProfile``.

    Args:
        name: Profile name.
        value: Profile mapping value.
        config_key: Full key path used in error messages.

    Raises:
        TypeError: If profile shape/types are invalid.
        ValueError: If required keys are missing.
    """
    section = expect_mapping(value, config_key)
    schema = expect_str(get_required_value(section, "schema", f"{config_key}.schema"), f"{config_key}.schema")

    fields = None
    if section.get("fields") is not None:
        fields = _dedup_fields(expect_str_list(section["fields"], f"{config_key}.fields"))
    return SearchProfile(name=name, schema=schema.strip(), fields=fields)


def _dedup_fields(fields: list[str]) -> tuple[str, ...]:
    """Strip names and drop blanks and duplicates, keeping first occurrence order."""
    seen: set[str] = set()
    unique: list[str] = []
    for field in fields:
        name = field.strip()
        if not name or name in seen:
            continue
        seen.add(name)
        unique.append(name)
    return tuple(unique)
