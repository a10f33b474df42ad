"""Catalog module application dependencies."""

from typing import NoReturn

from fastapi import Depends

from src.core.application.dependencies import get_response_cache, get_settings
from src.core.config import Settings
from src.core.domain.ports.response_cache import ResponseCache
from src.core.infrastructure.redis.keys import CacheKeys
from src.modules.catalog.application.services import CatalogService
from src.modules.catalog.domain.source import CatalogSource


def _missing_dependency(name: str) -> NoReturn:
    raise RuntimeError(f"Missing dependency override for {name}")


async def get_catalog_source() -> CatalogSource:
    _missing_dependency("CatalogSource")


async def get_catalog_service(
    source: CatalogSource = Depends(get_catalog_source),
    cache: ResponseCache = Depends(get_response_cache),
    config: Settings = Depends(get_settings),
) -> CatalogService:
    return CatalogService(
        source,
        cache,
        cache_key=CacheKeys.catalog(config.CATALOG_CACHE_KEY),
        ttl_seconds=config.CATALOG_CACHE_TTL_SEC,
    )
