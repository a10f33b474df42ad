"""Infrastructure dependency providers.

这些函数在 main.py 中覆盖各模块 application 层的占位依赖。
使用 HTTPConnection 以便同时服务于 HTTP 与 WebSocket 路由。
"""

from fastapi import Depends
from starlette.requests import HTTPConnection

from src.core.config import Settings
from src.core.domain.ports.rate_limiter import RateLimiter
from src.core.domain.ports.response_cache import ResponseCache
from src.core.infrastructure.container import ServiceContainer
from src.modules.catalog.domain.source import CatalogSource
from src.modules.conversion.domain.provider import ConversionProvider
from src.modules.media.domain.repository import WaveformStore
from src.modules.realtime.application.room_hub import PlaybackRoomHub


def get_container(connection: HTTPConnection) -> ServiceContainer:
    container = getattr(connection.app.state, "container", None)
    if container is None:
        raise RuntimeError("Service container not initialised (lifespan not run)")
    return container


def get_settings(
    container: ServiceContainer = Depends(get_container),
) -> Settings:
    return container.config


def get_response_cache(
    container: ServiceContainer = Depends(get_container),
) -> ResponseCache:
    return container.cache


def get_rate_limiter(
    container: ServiceContainer = Depends(get_container),
) -> RateLimiter:
    return container.rate_limiter


def get_catalog_source(
    container: ServiceContainer = Depends(get_container),
) -> CatalogSource:
    return container.catalog_source


def get_conversion_provider(
    container: ServiceContainer = Depends(get_container),
) -> ConversionProvider:
    return container.conversion_provider


def get_waveform_store(
    container: ServiceContainer = Depends(get_container),
) -> WaveformStore:
    return container.waveform_store


def get_room_hub(
    container: ServiceContainer = Depends(get_container),
) -> PlaybackRoomHub:
    return container.room_hub
