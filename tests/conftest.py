"""
pytest 配置和共享 fixtures。

测试分层：
- unit/: 单元测试（不依赖外部服务，上游用 httpx.MockTransport 或桩对象替代）

使用方法：
    # 运行所有测试
    uv run pytest

    # 运行带覆盖率
    uv run pytest --cov=src --cov-report=html
"""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from src.core.config import Settings
from src.core.domain.exceptions import UpstreamUnavailableError
from src.core.infrastructure.cache import InMemoryResponseCache
from src.core.infrastructure.container import ServiceContainer
from src.modules.catalog.domain.entities import CatalogItem
from src.modules.conversion.domain.entities import (
    ConversionOutcome,
    ConversionResult,
    MediaKind,
)
from src.modules.media.infrastructure.waveform_store import CacheWaveformStore
from tests.stubs import StubCatalogSource, StubConversionProvider

# ============================================
# 配置 Fixtures
# ============================================


@pytest.fixture
def test_settings() -> Settings:
    """测试环境配置。"""
    return Settings(
        ENVIRONMENT="local",
        CACHE_BACKEND="memory",
        YOUTUBE_API_KEY="yt-test-key",
        YOUTUBE_CHANNEL_ID="UC-test-channel",
        GIFTED_API_KEY="gifted-test-key",
    )


# ============================================
# 领域对象 Fixtures
# ============================================


@pytest.fixture
def sample_items() -> list[CatalogItem]:
    """三条目录示例：两条与 BBOY 相关。"""
    return [
        CatalogItem(
            id="vid-1",
            title="DJ BBOY Afrobeats Mix 2024",
            description="Non-stop party mix",
            thumbnail_url="https://i.ytimg.com/vi/vid-1/hqdefault.jpg",
            published_at=datetime(2024, 5, 1, tzinfo=UTC),
            owner_label="DJ BBOY",
        ),
        CatalogItem(
            id="vid-2",
            title="Amapiano Sunset Session",
            description="Chilled log drums and piano",
            thumbnail_url="https://i.ytimg.com/vi/vid-2/hqdefault.jpg",
            published_at=datetime(2024, 4, 20, tzinfo=UTC),
            owner_label="DJ BBOY",
        ),
        CatalogItem(
            id="vid-3",
            title="Throwback Hip-Hop Mix",
            description="Mixed live by dj bboy at the block party",
            thumbnail_url="https://i.ytimg.com/vi/vid-3/hqdefault.jpg",
            published_at=datetime(2024, 4, 1, tzinfo=UTC),
            owner_label="DJ BBOY",
        ),
    ]


@pytest.fixture
def sample_conversion_result() -> ConversionResult:
    return ConversionResult(
        download_url="https://cdn.example.com/files/vid-1.mp3",
        resolved_title="DJ BBOY Afrobeats Mix 2024",
        resolved_quality="320kbps",
        media_kind=MediaKind.AUDIO,
        thumbnail_url="https://i.ytimg.com/vi/vid-1/hqdefault.jpg",
        duration="58:12",
    )


# ============================================
# 缓存 Fixtures
# ============================================


@pytest.fixture
def memory_cache() -> InMemoryResponseCache:
    return InMemoryResponseCache()


@pytest.fixture
def mock_response_cache() -> MagicMock:
    """Mock 响应缓存（默认未命中）。"""
    from src.core.domain.ports.response_cache import ResponseCache

    cache = MagicMock(spec=ResponseCache)
    cache.backend_name = "mock"
    cache.get = AsyncMock(return_value=None)
    cache.set = AsyncMock(return_value=True)
    cache.check_health = AsyncMock(
        return_value={"status": "ok", "backend": "mock", "connected": True}
    )
    cache.close = AsyncMock()
    return cache


# ============================================
# HTTP Client Fixtures
# ============================================


@pytest.fixture
def catalog_source(sample_items) -> StubCatalogSource:
    return StubCatalogSource(items=sample_items)


@pytest.fixture
def conversion_provider(sample_conversion_result) -> StubConversionProvider:
    return StubConversionProvider(ConversionOutcome.success(sample_conversion_result))


@pytest.fixture
def container(
    test_settings, memory_cache, catalog_source, conversion_provider
) -> ServiceContainer:
    return ServiceContainer(
        config=test_settings,
        cache=memory_cache,
        catalog_source=catalog_source,
        conversion_provider=conversion_provider,
        waveform_store=CacheWaveformStore(memory_cache),
    )


@pytest.fixture
async def async_client(container) -> AsyncGenerator[AsyncClient, None]:
    """异步 HTTP 客户端（用于 API 测试）。

    ASGITransport 不执行 lifespan，因此直接把容器挂到 app.state 上。
    """
    from main import app

    app.state.container = container

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    del app.state.container


@pytest.fixture
def failing_source() -> StubCatalogSource:
    return StubCatalogSource(
        error=UpstreamUnavailableError("YouTube catalog", "HTTP 403")
    )
