"""Response cache backends."""

from src.core.infrastructure.cache.response_cache import (
    InMemoryResponseCache,
    NullResponseCache,
    RedisResponseCache,
    create_response_cache,
)

__all__ = [
    "InMemoryResponseCache",
    "NullResponseCache",
    "RedisResponseCache",
    "create_response_cache",
]
