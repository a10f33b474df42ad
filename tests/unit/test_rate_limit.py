"""限流单元测试。

测试覆盖：
- 内存固定窗口计数与窗口切换
- Redis 计数 key 与首次过期设置
- Redis 故障时放行
- 按缓存后端选择实现
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from src.core.config import Settings
from src.core.infrastructure.cache import (
    InMemoryResponseCache,
    NullResponseCache,
    RedisResponseCache,
)
from src.core.infrastructure.rate_limit import (
    InMemoryRateLimiter,
    NullRateLimiter,
    RedisRateLimiter,
    create_rate_limiter,
)
from src.core.infrastructure.redis.client import RedisClient

pytestmark = pytest.mark.anyio


class FakeClock:
    def __init__(self, now: float = 9000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


# ============================================
# 内存计数
# ============================================


class TestInMemoryRateLimiter:
    async def test_blocks_after_limit(self):
        limiter = InMemoryRateLimiter(limit=2, window_sec=900, clock=FakeClock())

        assert await limiter.check("10.0.0.1") == (True, 1)
        assert await limiter.check("10.0.0.1") == (True, 2)
        assert await limiter.check("10.0.0.1") == (False, 3)

    async def test_clients_are_counted_separately(self):
        limiter = InMemoryRateLimiter(limit=1, window_sec=900, clock=FakeClock())

        await limiter.check("10.0.0.1")

        assert await limiter.check("10.0.0.2") == (True, 1)

    async def test_next_window_resets_count(self):
        clock = FakeClock(9000.0)
        limiter = InMemoryRateLimiter(limit=1, window_sec=900, clock=clock)
        await limiter.check("10.0.0.1")
        assert (await limiter.check("10.0.0.1"))[0] is False

        clock.now = 9900.0

        assert await limiter.check("10.0.0.1") == (True, 1)


# ============================================
# Redis 计数
# ============================================


class TestRedisRateLimiter:
    async def test_counts_in_fixed_window(self):
        client = MagicMock(spec=RedisClient)
        client.rate_limit_check = AsyncMock(return_value=(False, 1001))
        limiter = RedisRateLimiter(
            client, limit=1000, window_sec=900, clock=FakeClock(9000.0)
        )

        assert await limiter.check("10.0.0.1") == (False, 1001)
        client.rate_limit_check.assert_awaited_once_with(
            resource="api",
            identifier="10.0.0.1",
            window="10",
            limit=1000,
            ttl=900,
        )

    async def test_backend_failure_allows_request(self):
        client = MagicMock(spec=RedisClient)
        client.rate_limit_check = AsyncMock(
            side_effect=RedisConnectionError("connection refused")
        )
        limiter = RedisRateLimiter(client, limit=1, window_sec=900)

        assert await limiter.check("10.0.0.1") == (True, 0)

    async def test_client_sets_expiry_only_on_first_hit(self):
        client = RedisClient(url="redis://cache:6379/0")
        client.incr = AsyncMock(side_effect=[1, 2])
        client.expire = AsyncMock(return_value=True)

        first = await client.rate_limit_check("api", "10.0.0.1", "10", limit=1, ttl=900)
        second = await client.rate_limit_check("api", "10.0.0.1", "10", limit=1, ttl=900)

        assert first == (True, 1)
        assert second == (False, 2)
        client.incr.assert_awaited_with("rate_limit:api:10.0.0.1:10")
        client.expire.assert_awaited_once_with("rate_limit:api:10.0.0.1:10", 900)


# ============================================
# 实现选择
# ============================================


class TestCreateRateLimiter:
    def test_disabled(self):
        limiter = create_rate_limiter(
            Settings(RATE_LIMIT_ENABLED=False), InMemoryResponseCache()
        )
        assert isinstance(limiter, NullRateLimiter)

    def test_memory_cache_uses_memory_counter(self):
        limiter = create_rate_limiter(
            Settings(RATE_LIMIT_MAX_REQUESTS=5, RATE_LIMIT_WINDOW_SEC=60),
            InMemoryResponseCache(),
        )
        assert isinstance(limiter, InMemoryRateLimiter)
        assert limiter.limit == 5
        assert limiter.window_sec == 60

    def test_redis_cache_shares_client(self):
        client = MagicMock(spec=RedisClient)
        limiter = create_rate_limiter(Settings(), RedisResponseCache(client))

        assert isinstance(limiter, RedisRateLimiter)
        assert limiter.redis_client is client
        assert limiter.limit == 1000
        assert limiter.window_sec == 900

    async def test_noop_cache_allows_everything(self):
        limiter = create_rate_limiter(Settings(), NullResponseCache())

        assert isinstance(limiter, NullRateLimiter)
        assert await limiter.check("10.0.0.1") == (True, 0)
