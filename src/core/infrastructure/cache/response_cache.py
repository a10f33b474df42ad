"""ResponseCache 的三种实现与启动期选择逻辑。

- RedisResponseCache: 基于 RedisClient，后端故障降级为 no-op
- InMemoryResponseCache: 进程内 TTL 字典（单进程开发/测试）
- NullResponseCache: 每次读都未命中，每次写都静默成功
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

from loguru import logger
from redis.exceptions import RedisError

from src.core.config import Settings
from src.core.domain.ports.response_cache import ResponseCache
from src.core.infrastructure.health import CacheHealthResult, HealthStatus
from src.core.infrastructure.logging import BusinessEvents
from src.core.infrastructure.redis.client import RedisClient, RedisUnavailableError

_BACKEND_ERRORS = (RedisError, OSError, TimeoutError)


class NullResponseCache(ResponseCache):
    """No-op cache used when no backend is configured or reachable."""

    backend_name = "none"

    def __init__(self, reason: str | None = None) -> None:
        self.reason = reason

    async def get(self, key: str) -> str | None:
        return None

    async def set(self, key: str, value: str, ttl_seconds: int | None) -> bool:
        return True

    async def check_health(self) -> dict[str, Any]:
        return CacheHealthResult(
            status=HealthStatus.SKIPPED,
            backend=self.backend_name,
            connected=False,
            error=self.reason,
        ).to_dict()


class InMemoryResponseCache(ResponseCache):
    """Process-local cache with per-key expiry."""

    backend_name = "memory"

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[str, float | None]] = {}

    async def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: str, ttl_seconds: int | None) -> bool:
        expires_at = None if ttl_seconds is None else self._clock() + ttl_seconds
        self._entries[key] = (value, expires_at)
        return True

    async def check_health(self) -> dict[str, Any]:
        return CacheHealthResult(
            status=HealthStatus.OK,
            backend=self.backend_name,
            connected=True,
        ).to_dict()

    async def close(self) -> None:
        self._entries.clear()


class RedisResponseCache(ResponseCache):
    """Redis-backed cache; every backend failure degrades to a miss."""

    backend_name = "redis"

    def __init__(self, redis_client: RedisClient) -> None:
        self.redis_client = redis_client

    async def get(self, key: str) -> str | None:
        try:
            return await self.redis_client.get(key)
        except _BACKEND_ERRORS as exc:
            self._degraded("get", key, exc)
            return None

    async def set(self, key: str, value: str, ttl_seconds: int | None) -> bool:
        try:
            return await self.redis_client.set(key, value, ex=ttl_seconds)
        except _BACKEND_ERRORS as exc:
            self._degraded("set", key, exc)
            return True

    async def check_health(self) -> dict[str, Any]:
        redis_health = await self.redis_client.health_check()
        return CacheHealthResult(
            status=redis_health.status,
            backend=self.backend_name,
            connected=redis_health.connected,
            version=redis_health.version,
            error=redis_health.error,
        ).to_dict()

    async def close(self) -> None:
        await self.redis_client.close()

    @staticmethod
    def _degraded(operation: str, key: str, exc: BaseException) -> None:
        logger.warning(f"Redis cache {operation} failed for key={key}: {exc}")
        BusinessEvents.feature_degraded(
            feature="response_cache",
            reason=f"{operation} failed: {exc}",
            key=key,
        )


async def create_response_cache(
    config: Settings,
    *,
    redis_client: RedisClient | None = None,
) -> ResponseCache:
    """根据配置选择缓存后端（仅在启动时调用一次）。

    Redis 已配置但启动探测失败时降级为 NullResponseCache，进程照常启动。
    """
    if config.CACHE_BACKEND == "memory":
        logger.info("Response cache backend: in-memory")
        return InMemoryResponseCache()

    if config.CACHE_BACKEND == "none":
        logger.info("Response cache disabled by configuration")
        return NullResponseCache(reason="disabled by configuration")

    if redis_client is None:
        if not config.REDIS_URL:
            logger.warning("REDIS_URL not configured - using no-op response cache")
            return NullResponseCache(reason="REDIS_URL not configured")
        redis_client = RedisClient(url=config.REDIS_URL)

    try:
        await redis_client.ensure_available(timeout=config.REDIS_PING_TIMEOUT_SEC)
    except RedisUnavailableError as exc:
        logger.warning(f"Redis unavailable at startup - using no-op cache: {exc}")
        BusinessEvents.feature_degraded(feature="response_cache", reason=str(exc))
        await redis_client.close()
        return NullResponseCache(reason=str(exc))

    logger.info("Response cache backend: redis")
    return RedisResponseCache(redis_client)
