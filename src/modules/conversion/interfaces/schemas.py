"""Conversion API schemas."""

from datetime import datetime

from pydantic import Field

from src.core.interfaces.http.response import (
    ApiResponse,
    CamelModel,
    TimestampedResponse,
)
from src.modules.conversion.domain.options import DownloadOption, DownloadOptions


class DownloadOptionSchema(CamelModel):
    quality: str = Field(..., description="质量档位")
    label: str = Field(..., description="展示名称")
    format: str = Field(..., description="文件格式")
    size: str = Field(..., description="大致文件大小")

    @classmethod
    def from_option(cls, option: DownloadOption) -> "DownloadOptionSchema":
        return cls(
            quality=option.quality,
            label=option.label,
            format=option.format,
            size=option.size,
        )


class DownloadOptionsSchema(CamelModel):
    video: list[DownloadOptionSchema]
    audio: list[DownloadOptionSchema]

    @classmethod
    def from_options(cls, options: DownloadOptions) -> "DownloadOptionsSchema":
        return cls(
            video=[DownloadOptionSchema.from_option(opt) for opt in options.video],
            audio=[DownloadOptionSchema.from_option(opt) for opt in options.audio],
        )


class DownloadOptionsResponse(TimestampedResponse):
    video_id: str
    options: DownloadOptionsSchema


class DownloadVideoSchema(CamelModel):
    video_id: str
    title: str
    thumbnail: str
    channel: str


class DownloadLinkSchema(CamelModel):
    url: str = Field(..., description="直链下载地址")
    format: str = Field(..., description="媒体类型（audio/video）")
    quality: str = Field(..., description="上游返回的实际质量")
    duration: str = Field(..., description="时长")
    expires: datetime | None = Field(None, description="声明的链接过期时间")


class DownloadResponse(ApiResponse):
    video: DownloadVideoSchema
    download: DownloadLinkSchema
