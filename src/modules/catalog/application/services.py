"""Catalog application service."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from src.core.domain.exceptions import EntityNotFoundError, UpstreamUnavailableError
from src.core.domain.ports.response_cache import ResponseCache
from src.core.infrastructure.logging import BusinessEvents
from src.modules.catalog.domain.entities import CachedCatalog, CatalogItem
from src.modules.catalog.domain.source import CatalogSource


class CatalogService:
    """Channel catalog read through the response cache.

    并发的两次缓存未命中可能都会请求上游并各自写回，结果相同，后写覆盖先写。
    """

    def __init__(
        self,
        source: CatalogSource,
        cache: ResponseCache,
        *,
        cache_key: str,
        ttl_seconds: int,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self.source = source
        self.cache = cache
        self.cache_key = cache_key
        self.ttl_seconds = ttl_seconds
        self._now = now or (lambda: datetime.now(UTC))

    async def list_channel_items(self) -> list[CatalogItem]:
        """Return the channel listing, fetching upstream only on cache miss.

        上游失败时返回空列表而不是抛出异常。
        """
        cached = await self._read_cache()
        if cached is not None:
            logger.debug(f"Catalog cache hit ({len(cached.items)} items)")
            return list(cached.items)

        try:
            items = await self.source.fetch_items()
        except UpstreamUnavailableError as exc:
            logger.error(f"Catalog source unavailable: {exc.message}")
            BusinessEvents.catalog_fetch_failed(
                channel_id=self.source.channel_id,
                error=exc.message,
            )
            return []

        snapshot = CachedCatalog(
            items=items,
            cached_at=self._now(),
            ttl_seconds=self.ttl_seconds,
        )
        await self.cache.set(
            self.cache_key, snapshot.model_dump_json(), self.ttl_seconds
        )
        BusinessEvents.catalog_refreshed(
            channel_id=self.source.channel_id,
            item_count=len(items),
            ttl_seconds=self.ttl_seconds,
        )
        return items

    async def search(self, query: str) -> list[CatalogItem]:
        """Case-insensitive substring match on title or description.

        No ranking; results keep catalog order.
        """
        items = await self.list_channel_items()
        if not query:
            return items
        return [item for item in items if item.matches(query)]

    async def get_item(self, item_id: str) -> CatalogItem:
        """Look up one item of the listing by its external id."""
        for item in await self.list_channel_items():
            if item.id == item_id:
                return item
        raise EntityNotFoundError("Video", item_id)

    async def _read_cache(self) -> CachedCatalog | None:
        raw = await self.cache.get(self.cache_key)
        if raw is None:
            return None
        try:
            return CachedCatalog.model_validate_json(raw)
        except PydanticValidationError as exc:
            # 损坏的缓存值按未命中处理，下次写入会整体覆盖
            logger.warning(f"Discarding unreadable catalog cache entry: {exc}")
            return None
