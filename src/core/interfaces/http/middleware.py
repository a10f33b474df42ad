"""HTTP access log middleware."""

import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from loguru import logger


async def access_log_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """每个请求一行访问日志（combined 风格字段）。"""
    started = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - started) * 1000

    client = request.client.host if request.client else "-"
    logger.info(
        f'{client} "{request.method} {request.url.path} '
        f'HTTP/{request.scope.get("http_version", "1.1")}" '
        f"{response.status_code} {duration_ms:.1f}ms "
        f'"{request.headers.get("user-agent", "-")}"'
    )
    return response
