"""Search service layer for FuzzyCast."""

from __future__ import annotations

from typing import TYPE_CHECKING

from FuzzyCast.services.search import FuzzySearchService
from FuzzyCast.utils.log import configure_logging

if TYPE_CHECKING:
    from FuzzyCast.config import AppConfig
    from FuzzyCast.schema.registry import SchemaRegistry


def create_search_service(
    config: AppConfig,
    registry: SchemaRegistry,
    *,
    session: str | None = None,
) -> FuzzySearchService:
    """Create a search service from configured profiles.

    The ``log`` section of ``config`` is applied to the package logger first,
    so profile warnings raised while the service is built already honour it.

    Args:
        config: Application configuration containing search profiles.
        registry: Registry holding every schema the profiles reference.
        session: Log file session name; file output needs both this and
            ``log.to_file``.

    Returns:
        Configured FuzzySearchService instance.

    Raises:
        ValueError: If a profile references an unregistered schema.
    """
    configure_logging(
        level=config.runtime.level,
        session=session,
        log_to_file=config.runtime.to_file,
        log_dir=config.runtime.dir,
    )
    return FuzzySearchService(registry=registry, profiles=config.search.profiles)


__all__ = [
    "FuzzySearchService",
    "create_search_service",
]
