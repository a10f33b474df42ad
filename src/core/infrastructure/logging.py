"""Logging configuration with structlog integration.

提供两种日志记录方式：
1. loguru: 用于一般调试日志
2. structlog: 用于关键业务事件的结构化日志
"""

import sys
from typing import Any

import structlog
from loguru import logger

from src.core.config import settings


def setup_logging() -> None:
    """Configure application logging with structlog and loguru."""
    _configure_structlog()
    _configure_loguru()

    logger.info(f"Logging configured with level: {settings.LOG_LEVEL}")


def _configure_structlog() -> None:
    """配置 structlog 处理器链。"""
    if settings.ENVIRONMENT == "local":
        # 本地开发使用人类可读格式
        renderer = structlog.dev.ConsoleRenderer(colors=True)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.CallsiteParameterAdder(
                [
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            ),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            _get_log_level_number(settings.LOG_LEVEL)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def _configure_loguru() -> None:
    """配置 loguru。"""
    logger.remove()

    logger.add(
        sys.stderr,
        level=settings.LOG_LEVEL,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    if settings.ENVIRONMENT != "local":
        logger.add(
            "logs/mixhub_{time:YYYY-MM-DD}.log",
            rotation="00:00",
            retention="30 days",
            level="INFO",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        )


def _get_log_level_number(level: str) -> int:
    """将日志级别字符串转换为数字。"""
    levels = {
        "DEBUG": 10,
        "INFO": 20,
        "WARNING": 30,
        "ERROR": 40,
        "CRITICAL": 50,
    }
    return levels.get(level.upper(), 20)


# ============================================================================
# 业务事件日志记录器
# ============================================================================

class BusinessEvents:
    """业务事件日志助手类。

    提供统一的业务事件日志记录接口，确保事件格式一致。

    Usage:
        from src.core.infrastructure.logging import BusinessEvents

        BusinessEvents.catalog_refreshed(channel_id="UC123", item_count=50)
        BusinessEvents.conversion_failed(item_id="abc", media_kind="audio", ...)
    """

    _log = structlog.get_logger("business.events")

    @classmethod
    def catalog_refreshed(
        cls,
        channel_id: str | None,
        item_count: int,
        ttl_seconds: int,
        **extra: Any,
    ) -> None:
        """记录目录从上游刷新事件。"""
        cls._log.info(
            "catalog_refreshed",
            event_type="catalog",
            channel_id=channel_id,
            item_count=item_count,
            ttl_seconds=ttl_seconds,
            **extra,
        )

    @classmethod
    def catalog_fetch_failed(
        cls,
        channel_id: str | None,
        error: str,
        **extra: Any,
    ) -> None:
        """记录目录抓取失败事件。"""
        cls._log.warning(
            "catalog_fetch_failed",
            event_type="catalog_error",
            channel_id=channel_id,
            error=error,
            **extra,
        )

    @classmethod
    def conversion_completed(
        cls,
        item_id: str,
        media_kind: str,
        quality_tier: str,
        latency_ms: int,
        **extra: Any,
    ) -> None:
        """记录转换成功事件。"""
        cls._log.info(
            "conversion_completed",
            event_type="conversion",
            item_id=item_id,
            media_kind=media_kind,
            quality_tier=quality_tier,
            latency_ms=latency_ms,
            **extra,
        )

    @classmethod
    def conversion_failed(
        cls,
        item_id: str,
        media_kind: str,
        quality_tier: str,
        error: str,
        **extra: Any,
    ) -> None:
        """记录转换失败事件。"""
        cls._log.warning(
            "conversion_failed",
            event_type="conversion_error",
            item_id=item_id,
            media_kind=media_kind,
            quality_tier=quality_tier,
            error=error,
            **extra,
        )

    @classmethod
    def feature_degraded(
        cls,
        feature: str,
        reason: str,
        **extra: Any,
    ) -> None:
        """记录功能降级事件。"""
        cls._log.warning(
            "feature_degraded",
            event_type="degradation",
            feature=feature,
            reason=reason,
            **extra,
        )
