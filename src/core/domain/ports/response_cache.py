"""Response cache port."""

from abc import ABC, abstractmethod
from typing import Any


class ResponseCache(ABC):
    """Port for the key-value cache holding serialized upstream responses.

    实现必须吞掉后端故障：读失败视为未命中，写失败视为静默接受。
    调用方不应感知当前使用的是哪种后端。
    """

    backend_name: str = "unknown"

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the cached value, or None on miss."""
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: int | None) -> bool:
        """Store a value; ttl_seconds=None means no expiry."""
        pass

    @abstractmethod
    async def check_health(self) -> dict[str, Any]:
        """Return a health snapshot of the backing store."""
        pass

    async def close(self) -> None:
        """Release backend resources."""
        return None
