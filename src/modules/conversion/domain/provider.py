"""Conversion provider port."""

from typing import Protocol

from src.modules.conversion.domain.entities import ConversionOutcome, ConversionRequest


class ConversionProvider(Protocol):
    """Port for the external download/conversion service.

    实现不得抛出异常：所有失败都以 ConversionOutcome.failed 返回。
    """

    async def convert(self, request: ConversionRequest) -> ConversionOutcome: ...
