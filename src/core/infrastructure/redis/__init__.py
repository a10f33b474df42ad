"""Redis 客户端封装。"""

from src.core.infrastructure.redis.client import (
    RedisClient,
    RedisUnavailableError,
)
from src.core.infrastructure.redis.keys import CacheKeys

__all__ = [
    "CacheKeys",
    "RedisClient",
    "RedisUnavailableError",
]
