"""Explicit service container.

启动时构建一次并挂到 app.state 上；处理函数通过依赖注入获取，而不是引用模块级全局变量。
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from loguru import logger

from src.core.config import Settings
from src.core.domain.ports.rate_limiter import RateLimiter
from src.core.domain.ports.response_cache import ResponseCache
from src.core.infrastructure.cache import create_response_cache
from src.core.infrastructure.rate_limit import NullRateLimiter, create_rate_limiter
from src.modules.catalog.domain.source import CatalogSource
from src.modules.catalog.infrastructure.youtube_source import YouTubeCatalogSource
from src.modules.conversion.domain.provider import ConversionProvider
from src.modules.conversion.infrastructure.gifted_provider import (
    GiftedConversionProvider,
)
from src.modules.media.domain.repository import WaveformStore
from src.modules.media.infrastructure.waveform_store import CacheWaveformStore
from src.modules.realtime.application.room_hub import PlaybackRoomHub


@dataclass
class ServiceContainer:
    """Handles to the cache and the external clients."""

    config: Settings
    cache: ResponseCache
    catalog_source: CatalogSource
    conversion_provider: ConversionProvider
    waveform_store: WaveformStore
    rate_limiter: RateLimiter = field(default_factory=NullRateLimiter)
    room_hub: PlaybackRoomHub = field(default_factory=PlaybackRoomHub)
    started_at: float = field(default_factory=time.monotonic)

    @property
    def uptime_sec(self) -> float:
        return time.monotonic() - self.started_at

    async def close(self) -> None:
        await self.cache.close()


async def build_container(config: Settings) -> ServiceContainer:
    """Create every long-lived dependency once at startup."""
    cache = await create_response_cache(config)
    catalog_source = YouTubeCatalogSource(
        api_key=config.YOUTUBE_API_KEY,
        channel_id=config.YOUTUBE_CHANNEL_ID,
        base_url=config.YOUTUBE_API_BASE_URL,
        max_results=config.YOUTUBE_MAX_RESULTS,
        timeout_sec=config.CATALOG_FETCH_TIMEOUT_SEC,
        user_agent=config.HTTP_USER_AGENT,
    )
    conversion_provider = GiftedConversionProvider(
        api_key=config.GIFTED_API_KEY,
        base_url=config.GIFTED_API_BASE_URL,
        source_url_template=config.SOURCE_URL_TEMPLATE,
        timeout_sec=config.CONVERSION_TIMEOUT_SEC,
        user_agent=config.HTTP_USER_AGENT,
    )

    if not catalog_source.is_configured:
        logger.warning("YouTube catalog source not configured - listings will be empty")
    if not conversion_provider.is_configured:
        logger.warning("GIFTED_API_KEY not configured - downloads will fail")

    return ServiceContainer(
        config=config,
        cache=cache,
        catalog_source=catalog_source,
        conversion_provider=conversion_provider,
        waveform_store=CacheWaveformStore(cache),
        rate_limiter=create_rate_limiter(config, cache),
    )
