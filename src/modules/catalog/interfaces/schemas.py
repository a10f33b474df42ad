"""Catalog API schemas."""

from datetime import datetime

from pydantic import Field

from src.core.interfaces.http.response import (
    ApiResponse,
    CamelModel,
    TimestampedResponse,
)
from src.modules.catalog.domain.entities import CatalogItem


class VideoResponse(CamelModel):
    """Video as rendered by the browser client."""

    video_id: str = Field(..., description="视频ID")
    title: str = Field(..., description="标题")
    description: str = Field("", description="简介")
    thumbnail: str = Field("", description="缩略图URL")
    published_at: datetime | None = Field(None, description="发布时间")
    channel_title: str = Field("", description="频道名称")

    @classmethod
    def from_item(cls, item: CatalogItem) -> "VideoResponse":
        return cls(
            video_id=item.id,
            title=item.title,
            description=item.description,
            thumbnail=item.thumbnail_url,
            published_at=item.published_at,
            channel_title=item.owner_label,
        )


class ChannelVideosResponse(TimestampedResponse):
    """Channel listing response."""

    videos: list[VideoResponse]
    total: int
    channel_id: str | None = None


class SearchResponse(ApiResponse):
    """Search response."""

    videos: list[VideoResponse]
    total: int
    query: str
