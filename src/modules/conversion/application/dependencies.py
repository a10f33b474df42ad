"""Conversion module application dependencies."""

from datetime import timedelta
from typing import NoReturn

from fastapi import Depends

from src.core.application.dependencies import get_settings
from src.core.config import Settings
from src.modules.conversion.application.services import ConversionGateway
from src.modules.conversion.domain.provider import ConversionProvider


def _missing_dependency(name: str) -> NoReturn:
    raise RuntimeError(f"Missing dependency override for {name}")


async def get_conversion_provider() -> ConversionProvider:
    _missing_dependency("ConversionProvider")


async def get_conversion_gateway(
    provider: ConversionProvider = Depends(get_conversion_provider),
    config: Settings = Depends(get_settings),
) -> ConversionGateway:
    return ConversionGateway(
        provider,
        link_ttl=timedelta(hours=config.DOWNLOAD_LINK_TTL_HOURS),
        stream_quality=config.STREAM_DEFAULT_QUALITY,
    )
