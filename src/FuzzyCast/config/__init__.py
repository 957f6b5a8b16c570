"""Public configuration API for FuzzyCast."""

from __future__ import annotations

from FuzzyCast.config.app import (
    AppConfig,
    load_config,
    load_config_with_defaults,
    merge_config_dicts,
    parse_config_dict,
)
from FuzzyCast.config.runtime import RuntimeConfig
from FuzzyCast.config.search import SearchConfig, SearchProfile

__all__ = [
    "RuntimeConfig",
    "SearchConfig",
    "SearchProfile",
    "AppConfig",
    "load_config",
    "load_config_with_defaults",
    "merge_config_dicts",
    "parse_config_dict",
]
