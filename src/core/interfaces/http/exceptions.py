"""HTTP exception handlers.

提供统一的异常处理机制，将领域异常转换为标准 HTTP 响应。
各模块的异常类通过定义 http_status_code 和 error_code 类属性来自定义响应。
响应保留浏览器客户端依赖的 success 字段。
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse
from loguru import logger

from src.core.config import settings
from src.core.domain.exceptions import DomainException, UpstreamUnavailableError


def _error_content(code: str, message: str) -> dict:
    return {
        "success": False,
        "error": {
            "code": code,
            "message": message,
        },
    }


async def domain_exception_handler(
    _request: Request, exc: DomainException
) -> JSONResponse:
    """Handle domain exceptions.

    通过读取异常类的 http_status_code 和 error_code 类属性来确定响应。
    """
    status_code = getattr(exc, "http_status_code", 400)
    error_code = getattr(exc, "error_code", "DOMAIN_ERROR")

    if isinstance(exc, UpstreamUnavailableError):
        logger.warning(f"Upstream failure surfaced to client: {exc.message}")

    return JSONResponse(
        status_code=status_code,
        content=_error_content(error_code, exc.message),
    )


async def global_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Handle all unhandled exceptions.

    仅在本地开发环境返回异常详情，其它环境返回通用信息。
    """
    logger.exception(f"Unhandled exception: {exc}")
    message = "An internal error occurred"
    if settings.ENVIRONMENT == "local":
        message = f"{message}: {exc}"
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_content("INTERNAL_ERROR", message),
    )
