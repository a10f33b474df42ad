"""RateLimiter 的实现与选择逻辑。

限流计数与响应缓存共用同一个后端：Redis 缓存时使用 Redis 计数，
内存缓存时使用进程内计数，no-op 缓存时全部放行。
"""

from __future__ import annotations

import time
from collections.abc import Callable

from loguru import logger
from redis.exceptions import RedisError

from src.core.config import Settings
from src.core.domain.ports.rate_limiter import RateLimiter
from src.core.domain.ports.response_cache import ResponseCache
from src.core.infrastructure.cache import InMemoryResponseCache, RedisResponseCache
from src.core.infrastructure.logging import BusinessEvents
from src.core.infrastructure.redis.client import RedisClient

_BACKEND_ERRORS = (RedisError, OSError, TimeoutError)

RATE_LIMIT_RESOURCE = "api"


class NullRateLimiter(RateLimiter):
    """Allows every request."""

    backend_name = "none"

    async def check(self, identifier: str) -> tuple[bool, int]:
        return True, 0


class InMemoryRateLimiter(RateLimiter):
    """Process-local fixed-window counter."""

    backend_name = "memory"

    def __init__(
        self,
        limit: int,
        window_sec: int,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.limit = limit
        self.window_sec = window_sec
        self._clock = clock
        self._counts: dict[tuple[str, int], int] = {}

    async def check(self, identifier: str) -> tuple[bool, int]:
        window = int(self._clock() // self.window_sec)
        # 丢弃过期窗口
        for key in [k for k in self._counts if k[1] != window]:
            del self._counts[key]
        current = self._counts.get((identifier, window), 0) + 1
        self._counts[(identifier, window)] = current
        return current <= self.limit, current


class RedisRateLimiter(RateLimiter):
    """Redis fixed-window counter; backend failures allow the request."""

    backend_name = "redis"

    def __init__(
        self,
        redis_client: RedisClient,
        limit: int,
        window_sec: int,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.redis_client = redis_client
        self.limit = limit
        self.window_sec = window_sec
        self._clock = clock

    async def check(self, identifier: str) -> tuple[bool, int]:
        window = int(self._clock() // self.window_sec)
        try:
            return await self.redis_client.rate_limit_check(
                resource=RATE_LIMIT_RESOURCE,
                identifier=identifier,
                window=str(window),
                limit=self.limit,
                ttl=self.window_sec,
            )
        except _BACKEND_ERRORS as exc:
            logger.warning(f"Rate limit check failed for {identifier}: {exc}")
            BusinessEvents.feature_degraded(
                feature="rate_limit",
                reason=f"check failed: {exc}",
            )
            return True, 0


def create_rate_limiter(config: Settings, cache: ResponseCache) -> RateLimiter:
    """根据已选定的缓存后端选择限流实现。"""
    if not config.RATE_LIMIT_ENABLED:
        logger.info("Rate limiting disabled by configuration")
        return NullRateLimiter()

    if isinstance(cache, RedisResponseCache):
        return RedisRateLimiter(
            cache.redis_client,
            limit=config.RATE_LIMIT_MAX_REQUESTS,
            window_sec=config.RATE_LIMIT_WINDOW_SEC,
        )

    if isinstance(cache, InMemoryResponseCache):
        return InMemoryRateLimiter(
            limit=config.RATE_LIMIT_MAX_REQUESTS,
            window_sec=config.RATE_LIMIT_WINDOW_SEC,
        )

    logger.warning("No counter backend for rate limiting - all requests allowed")
    return NullRateLimiter()
