"""Redis 客户端封装。

提供统一的 Redis 访问接口，支持：
- 连接池管理（延迟初始化）
- 可用性探测与健康检查
- 缓存读写封装
- 固定窗口速率限制计数
"""

from __future__ import annotations

import asyncio
from datetime import timedelta
from typing import TYPE_CHECKING

import redis.asyncio as aioredis
from loguru import logger

if TYPE_CHECKING:
    from redis.asyncio import Redis

from src.core.infrastructure.health import HealthStatus, RedisHealthResult
from src.core.infrastructure.redis.keys import CacheKeys


class RedisUnavailableError(RuntimeError):
    """Redis 不可用（连接失败/超时等）。"""


class RedisClient:
    """Redis 客户端封装类。"""

    def __init__(self, url: str):
        """初始化 Redis 客户端。

        Args:
            url: Redis 连接 URL
        """
        self._url = url
        self._client: Redis | None = None

    @property
    def client(self) -> Redis:
        """获取 Redis 客户端实例（延迟初始化）。"""
        if self._client is None:
            self._client = aioredis.from_url(
                self._url,
                encoding="utf-8",
                decode_responses=True,
                socket_timeout=10.0,  # 读写超时 10 秒
                socket_connect_timeout=5.0,  # 连接超时 5 秒
            )
        return self._client

    async def close(self) -> None:
        """关闭 Redis 连接。"""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def ping(self) -> bool:
        """检查 Redis 连接是否正常。

        Returns:
            连接正常返回 True，否则返回 False
        """
        try:
            return await self.client.ping()
        except Exception as e:
            logger.warning(f"Redis ping failed: {e}")
            return False

    async def ensure_available(self, *, timeout: float = 5.0) -> None:
        """确认 Redis 当前可用，否则抛出 RedisUnavailableError。

        用于启动时选择缓存后端：探测失败则整个进程使用 no-op 缓存。
        """
        try:
            # 直接调用底层 client.ping()，避免与 self.ping() 的日志重复。
            ok = await asyncio.wait_for(self.client.ping(), timeout=timeout)
        except TimeoutError as e:
            raise RedisUnavailableError("Redis ping timeout") from e
        except Exception as e:
            raise RedisUnavailableError(f"Redis ping failed: {e}") from e
        if not ok:
            raise RedisUnavailableError("Redis ping returned falsy result")

    async def health_check(self) -> RedisHealthResult:
        """执行 Redis 健康检查。

        Returns:
            RedisHealthResult: 健康检查结果
        """
        try:
            is_connected = await self.ping()
            info = await self.client.info("server") if is_connected else {}
            return RedisHealthResult(
                status=HealthStatus.OK if is_connected else HealthStatus.ERROR,
                connected=is_connected,
                version=info.get("redis_version", "unknown"),
            )
        except Exception as e:
            return RedisHealthResult(
                status=HealthStatus.ERROR,
                connected=False,
                error=str(e),
            )

    # ============ 缓存操作 ============

    async def get(self, key: str) -> str | None:
        """获取字符串值。"""
        return await self.client.get(key)

    async def set(
        self,
        key: str,
        value: str,
        ex: int | timedelta | None = None,
    ) -> bool:
        """设置字符串值。

        Args:
            key: 键名
            value: 值
            ex: 过期时间（秒或 timedelta），None 表示永不过期

        Returns:
            设置成功返回 True
        """
        return bool(await self.client.set(key, value, ex=ex))

    async def expire(self, key: str, seconds: int) -> bool:
        """设置键的过期时间。"""
        return await self.client.expire(key, seconds)

    async def incr(self, key: str, amount: int = 1) -> int:
        """增加计数器。"""
        return await self.client.incrby(key, amount)

    # ============ 速率限制 ============

    async def rate_limit_check(
        self,
        resource: str,
        identifier: str,
        window: str,
        limit: int,
        ttl: int = 60,
    ) -> tuple[bool, int]:
        """检查并更新速率限制。

        Args:
            resource: 资源类型
            identifier: 标识符（客户端 IP）
            window: 时间窗口编号
            limit: 窗口内允许的最大请求数
            ttl: 计数键过期时间（秒）

        Returns:
            (是否允许, 当前计数)
        """
        key = CacheKeys.rate_limit(resource, identifier, window)
        current = await self.incr(key)

        # 首次创建时设置过期时间
        if current == 1:
            await self.expire(key, ttl)

        return current <= limit, current
