"""响应缓存后端单元测试。

测试覆盖：
- 内存缓存 TTL 过期
- no-op 缓存语义
- Redis 后端故障降级
- 启动期后端选择
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from src.core.config import Settings
from src.core.infrastructure.cache import (
    InMemoryResponseCache,
    NullResponseCache,
    RedisResponseCache,
    create_response_cache,
)
from src.core.infrastructure.redis.client import RedisClient, RedisUnavailableError

pytestmark = pytest.mark.anyio


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _mock_redis_client() -> MagicMock:
    client = MagicMock(spec=RedisClient)
    client.get = AsyncMock(return_value=None)
    client.set = AsyncMock(return_value=True)
    client.ensure_available = AsyncMock(return_value=None)
    client.close = AsyncMock()
    return client


# ============================================
# InMemoryResponseCache
# ============================================


class TestInMemoryResponseCache:
    async def test_value_present_before_ttl_and_absent_after(self):
        clock = FakeClock()
        cache = InMemoryResponseCache(clock=clock)

        await cache.set("k", "v", ttl_seconds=1)
        clock.now = 1000.999
        assert await cache.get("k") == "v"

        clock.now = 1001.0
        assert await cache.get("k") is None

    async def test_no_ttl_never_expires(self):
        clock = FakeClock()
        cache = InMemoryResponseCache(clock=clock)

        await cache.set("k", "v", ttl_seconds=None)
        clock.advance(10**9)
        assert await cache.get("k") == "v"

    async def test_set_replaces_value_and_expiry(self):
        clock = FakeClock()
        cache = InMemoryResponseCache(clock=clock)

        await cache.set("k", "old", ttl_seconds=1)
        await cache.set("k", "new", ttl_seconds=60)
        clock.advance(30)
        assert await cache.get("k") == "new"

    async def test_health_is_ok(self):
        health = await InMemoryResponseCache().check_health()
        assert health["status"] == "ok"
        assert health["backend"] == "memory"


# ============================================
# NullResponseCache
# ============================================


class TestNullResponseCache:
    async def test_every_get_misses_and_every_set_accepts(self):
        cache = NullResponseCache()
        assert await cache.set("k", "v", ttl_seconds=3600) is True
        assert await cache.get("k") is None

    async def test_health_reports_reason(self):
        health = await NullResponseCache(reason="REDIS_URL not configured").check_health()
        assert health["status"] == "skipped"
        assert health["error"] == "REDIS_URL not configured"


# ============================================
# RedisResponseCache
# ============================================


class TestRedisResponseCache:
    async def test_get_and_set_pass_through(self):
        client = _mock_redis_client()
        client.get = AsyncMock(return_value="cached")
        cache = RedisResponseCache(client)

        assert await cache.get("k") == "cached"
        assert await cache.set("k", "v", ttl_seconds=3600) is True
        client.set.assert_awaited_once_with("k", "v", ex=3600)

    async def test_get_failure_degrades_to_miss(self):
        client = _mock_redis_client()
        client.get = AsyncMock(side_effect=RedisConnectionError("connection refused"))
        cache = RedisResponseCache(client)

        assert await cache.get("k") is None

    async def test_set_failure_is_silent(self):
        client = _mock_redis_client()
        client.set = AsyncMock(side_effect=TimeoutError())
        cache = RedisResponseCache(client)

        assert await cache.set("k", "v", ttl_seconds=10) is True
        assert await NullResponseCache().set("k", "v", ttl_seconds=10) is True


# ============================================
# 启动期后端选择
# ============================================


class TestCreateResponseCache:
    async def test_memory_backend(self):
        cache = await create_response_cache(Settings(CACHE_BACKEND="memory"))
        assert isinstance(cache, InMemoryResponseCache)

    async def test_disabled_backend(self):
        cache = await create_response_cache(Settings(CACHE_BACKEND="none"))
        assert isinstance(cache, NullResponseCache)

    async def test_redis_without_url_falls_back_to_noop(self):
        cache = await create_response_cache(
            Settings(CACHE_BACKEND="redis", REDIS_URL=None)
        )
        assert isinstance(cache, NullResponseCache)

    async def test_unreachable_redis_falls_back_to_noop(self):
        client = _mock_redis_client()
        client.ensure_available = AsyncMock(
            side_effect=RedisUnavailableError("Redis ping timeout")
        )

        cache = await create_response_cache(
            Settings(CACHE_BACKEND="redis", REDIS_URL="redis://cache:6379/0"),
            redis_client=client,
        )

        assert isinstance(cache, NullResponseCache)
        client.close.assert_awaited_once()

    async def test_reachable_redis_is_used(self):
        client = _mock_redis_client()

        cache = await create_response_cache(
            Settings(CACHE_BACKEND="redis", REDIS_URL="redis://cache:6379/0"),
            redis_client=client,
        )

        assert isinstance(cache, RedisResponseCache)
        assert cache.backend_name == "redis"
