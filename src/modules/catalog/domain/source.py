"""Catalog source port."""

from typing import Protocol

from src.modules.catalog.domain.entities import CatalogItem


class CatalogSource(Protocol):
    """Port for listing the configured channel's items.

    上游不可达、非 2xx 或返回畸形数据时抛出 UpstreamUnavailableError。
    """

    channel_id: str | None

    async def fetch_items(self) -> list[CatalogItem]: ...
