"""Conversion domain models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class MediaKind(str, Enum):
    """请求的媒体类型。"""

    AUDIO = "audio"
    VIDEO = "video"


@dataclass(frozen=True)
class ConversionRequest:
    """一次转换请求，只在一次出站调用期间存在，不持久化。"""

    item_id: str
    media_kind: MediaKind
    quality_tier: str


@dataclass(frozen=True)
class ConversionResult:
    """转换成功后的下载信息。"""

    download_url: str
    resolved_title: str
    resolved_quality: str
    media_kind: MediaKind
    thumbnail_url: str = ""
    duration: str = "0:00"
    expires_at: datetime | None = None


class ConversionStatus(str, Enum):
    """转换状态枚举。"""

    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class ConversionOutcome:
    """转换结果封装（成功/失败二选一）。"""

    status: ConversionStatus
    result: ConversionResult | None = None
    error_message: str | None = None
    duration_ms: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return self.status == ConversionStatus.SUCCESS and self.result is not None

    @classmethod
    def success(
        cls,
        result: ConversionResult,
        duration_ms: int = 0,
        metadata: dict[str, Any] | None = None,
    ) -> "ConversionOutcome":
        """创建成功结果。"""
        return cls(
            status=ConversionStatus.SUCCESS,
            result=result,
            duration_ms=duration_ms,
            metadata=metadata or {},
        )

    @classmethod
    def failed(
        cls,
        error_message: str,
        duration_ms: int = 0,
        metadata: dict[str, Any] | None = None,
    ) -> "ConversionOutcome":
        """创建失败结果。"""
        return cls(
            status=ConversionStatus.FAILED,
            error_message=error_message,
            duration_ms=duration_ms,
            metadata=metadata or {},
        )


@dataclass(frozen=True)
class StreamTarget:
    """播放跳转目标。

    range_requested 只影响响应头，不代表做了字节区间切片。
    """

    url: str
    range_requested: bool = False
