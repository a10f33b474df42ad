"""Core application dependencies.

These functions define application-level dependency boundaries and are overridden
by infrastructure in `main.py`.
"""

from __future__ import annotations

from typing import NoReturn

from src.core.config import Settings
from src.core.domain.ports.rate_limiter import RateLimiter
from src.core.domain.ports.response_cache import ResponseCache


def _missing_dependency(name: str) -> NoReturn:
    raise RuntimeError(f"Missing dependency override for {name}")


async def get_settings() -> Settings:
    _missing_dependency("Settings")


async def get_response_cache() -> ResponseCache:
    _missing_dependency("ResponseCache")


async def get_rate_limiter() -> RateLimiter:
    _missing_dependency("RateLimiter")
