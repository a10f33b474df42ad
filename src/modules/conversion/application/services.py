"""Conversion gateway application service."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from src.core.domain.exceptions import UpstreamUnavailableError, ValidationError
from src.core.infrastructure.logging import BusinessEvents
from src.modules.conversion.domain.entities import (
    ConversionOutcome,
    ConversionRequest,
    MediaKind,
    StreamTarget,
)
from src.modules.conversion.domain.options import DOWNLOAD_OPTIONS, DownloadOptions
from src.modules.conversion.domain.provider import ConversionProvider


class ConversionGateway:
    """Unified download/stream operations over the conversion provider.

    网关不持有共享状态；只使用条目 ID 构造上游定位，不读取目录元数据。
    """

    def __init__(
        self,
        provider: ConversionProvider,
        *,
        link_ttl: timedelta,
        stream_quality: str,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self.provider = provider
        self.link_ttl = link_ttl
        self.stream_quality = stream_quality
        self._now = now or (lambda: datetime.now(UTC))

    def get_download_options(self, item_id: str) -> DownloadOptions:
        """Static menu, identical for every item id."""
        del item_id
        return DOWNLOAD_OPTIONS

    def build_request(
        self, item_id: str, media_kind: str, quality_tier: str
    ) -> ConversionRequest:
        """Validate raw request values against the static menu."""
        try:
            kind = MediaKind(media_kind)
        except ValueError as exc:
            raise ValidationError(
                f"Unsupported format '{media_kind}', expected one of: "
                + ", ".join(k.value for k in MediaKind)
            ) from exc
        if not DOWNLOAD_OPTIONS.supports(kind, quality_tier):
            raise ValidationError(
                f"Unsupported quality '{quality_tier}' for {kind.value}"
            )
        return ConversionRequest(
            item_id=item_id, media_kind=kind, quality_tier=quality_tier
        )

    async def convert(
        self, item_id: str, media_kind: str, quality_tier: str
    ) -> ConversionOutcome:
        """Request a fresh download URL; failures come back as tagged outcomes."""
        request = self.build_request(item_id, media_kind, quality_tier)
        outcome = await self.provider.convert(request)

        if not outcome.is_success or outcome.result is None:
            BusinessEvents.conversion_failed(
                item_id=item_id,
                media_kind=request.media_kind.value,
                quality_tier=quality_tier,
                error=outcome.error_message or "unknown error",
            )
            return outcome

        # 有效期只是对客户端的声明，真实过期由上游控制
        outcome.result = dataclasses.replace(
            outcome.result, expires_at=self._now() + self.link_ttl
        )
        BusinessEvents.conversion_completed(
            item_id=item_id,
            media_kind=request.media_kind.value,
            quality_tier=quality_tier,
            latency_ms=outcome.duration_ms,
        )
        return outcome

    async def stream(self, item_id: str, range_header: str | None) -> StreamTarget:
        """Resolve a playable URL for the audio player.

        不做字节区间代理：带 Range 头的请求同样得到整段跳转。
        """
        outcome = await self.convert(item_id, MediaKind.AUDIO.value, self.stream_quality)
        if not outcome.is_success or outcome.result is None:
            raise UpstreamUnavailableError(
                "Streaming", outcome.error_message or "conversion failed"
            )
        return StreamTarget(
            url=outcome.result.download_url,
            range_requested=bool(range_header),
        )
