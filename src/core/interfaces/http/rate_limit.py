"""Per-client request budget for the HTTP API."""

from fastapi import Depends, Request
from loguru import logger

from src.core.application.dependencies import get_rate_limiter, get_settings
from src.core.config import Settings
from src.core.domain.exceptions import RateLimitExceededError
from src.core.domain.ports.rate_limiter import RateLimiter


def get_request_ip(request: Request, *, trust_proxy: bool = False) -> str | None:
    if trust_proxy:
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()
        real_ip = request.headers.get("x-real-ip")
        if real_ip:
            return real_ip
    if not request.client:
        return None
    return request.client.host


async def enforce_rate_limit(
    request: Request,
    limiter: RateLimiter = Depends(get_rate_limiter),
    config: Settings = Depends(get_settings),
) -> None:
    """超出窗口配额时返回 429，由 domain_exception_handler 渲染统一错误格式。"""
    identifier = (
        get_request_ip(request, trust_proxy=config.TRUST_PROXY_HEADERS) or "unknown"
    )
    allowed, current = await limiter.check(identifier)
    if not allowed:
        logger.warning(
            f"Rate limit exceeded: client={identifier} count={current} "
            f"limit={config.RATE_LIMIT_MAX_REQUESTS}"
        )
        raise RateLimitExceededError()
