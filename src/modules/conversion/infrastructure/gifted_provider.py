"""GiftedTech download API provider."""

from __future__ import annotations

import time
from typing import Any

import httpx
from loguru import logger
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from src.core.config import settings
from src.modules.conversion.domain.entities import (
    ConversionOutcome,
    ConversionRequest,
    ConversionResult,
    MediaKind,
)

# 上游端点：dlmp3 专用于 mp3；ytaudio 按码率转码；ytv 为视频
ENDPOINT_MP3 = "dlmp3"
ENDPOINT_AUDIO = "ytaudio"
ENDPOINT_VIDEO = "ytv"

# 上游视频默认清晰度，等于该值时不传 quality 参数
_UPSTREAM_DEFAULT_VIDEO_QUALITY = "720p"


class _GiftedResult(BaseModel):
    download_url: str = Field(..., min_length=1)
    title: str | None = None
    thumbnail: str | None = None
    duration: str | int | float | None = None
    quality: str | None = None


class _GiftedResponse(BaseModel):
    success: bool
    result: _GiftedResult | None = None


def select_endpoint(request: ConversionRequest) -> tuple[str, dict[str, str]]:
    """Pick the upstream endpoint and its extra query params."""
    if request.media_kind == MediaKind.VIDEO:
        params: dict[str, str] = {}
        if request.quality_tier != _UPSTREAM_DEFAULT_VIDEO_QUALITY:
            params["quality"] = request.quality_tier
        return ENDPOINT_VIDEO, params
    if request.quality_tier == "mp3":
        return ENDPOINT_MP3, {}
    return ENDPOINT_AUDIO, {"format": request.quality_tier}


class GiftedConversionProvider:
    """Resolve a time-limited download URL for one catalog item.

    每次调用都是一次独立的出站请求：不缓存、不去重、不重试。
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        source_url_template: str | None = None,
        timeout_sec: float | None = None,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.GIFTED_API_KEY
        self.base_url = (base_url or settings.GIFTED_API_BASE_URL).rstrip("/")
        self.source_url_template = (
            source_url_template or settings.SOURCE_URL_TEMPLATE
        )
        self.timeout_sec = timeout_sec or settings.CONVERSION_TIMEOUT_SEC
        self.user_agent = user_agent or settings.HTTP_USER_AGENT
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def build_source_url(self, item_id: str) -> str:
        """上游需要完整的来源 URL，而不是裸 ID。"""
        return self.source_url_template.format(item_id=item_id)

    async def convert(self, request: ConversionRequest) -> ConversionOutcome:
        start_time = time.time()
        if not self.is_configured:
            return ConversionOutcome.failed("GIFTED_API_KEY not configured")

        endpoint, extra_params = select_endpoint(request)
        api_url = f"{self.base_url}/{endpoint}"
        params = {
            "apikey": str(self.api_key),
            **extra_params,
            "url": self.build_source_url(request.item_id),
        }
        # apikey 不写日志
        logger.info(
            f"Calling conversion endpoint {endpoint} for {request.item_id} "
            f"({request.media_kind.value}/{request.quality_tier})"
        )

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_sec,
                transport=self._transport,
            ) as client:
                response = await client.get(
                    api_url,
                    params=params,
                    headers={
                        "User-Agent": self.user_agent,
                        "Accept": "application/json",
                    },
                )
                response.raise_for_status()
                payload = response.json()
            result = self._parse_payload(payload, request)
        except httpx.TimeoutException as exc:
            logger.warning(f"Conversion timeout for {request.item_id}: {exc}")
            return ConversionOutcome.failed(
                f"Timeout after {self.timeout_sec:g}s",
                duration_ms=self._elapsed_ms(start_time),
            )
        except httpx.HTTPStatusError as exc:
            logger.warning(
                f"Conversion HTTP error for {request.item_id}: "
                f"{exc.response.status_code}"
            )
            return ConversionOutcome.failed(
                f"HTTP {exc.response.status_code}",
                duration_ms=self._elapsed_ms(start_time),
            )
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(f"Conversion error for {request.item_id}: {exc}")
            return ConversionOutcome.failed(
                f"Error: {exc}",
                duration_ms=self._elapsed_ms(start_time),
            )

        return ConversionOutcome.success(
            result,
            duration_ms=self._elapsed_ms(start_time),
            metadata={"endpoint": endpoint},
        )

    @staticmethod
    def _parse_payload(payload: Any, request: ConversionRequest) -> ConversionResult:
        try:
            parsed = _GiftedResponse.model_validate(payload)
        except PydanticValidationError as exc:
            raise ValueError(
                f"malformed conversion payload ({exc.error_count()} errors)"
            ) from exc

        if not parsed.success or parsed.result is None:
            raise ValueError("Conversion service returned error")

        result = parsed.result
        duration = result.duration
        return ConversionResult(
            download_url=result.download_url,
            resolved_title=result.title or "Unknown Title",
            resolved_quality=result.quality or request.quality_tier,
            media_kind=request.media_kind,
            thumbnail_url=result.thumbnail or "",
            duration=str(duration) if duration not in (None, "") else "0:00",
        )

    @staticmethod
    def _elapsed_ms(start_time: float) -> int:
        return int((time.time() - start_time) * 1000)
