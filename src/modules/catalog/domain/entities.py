"""Catalog domain models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CatalogItem(BaseModel):
    """频道中的一个视频条目。

    一旦抓取即不可变；上游刷新时整表替换，不做字段级合并。
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="外部平台视频 ID")
    title: str = Field(..., description="标题")
    description: str = Field(default="", description="简介")
    thumbnail_url: str = Field(default="", description="缩略图 URL")
    published_at: datetime | None = Field(default=None, description="发布时间")
    owner_label: str = Field(default="", description="频道名称")

    def matches(self, query: str) -> bool:
        """标题或简介包含 query（不区分大小写）。"""
        needle = query.casefold()
        return needle in self.title.casefold() or needle in self.description.casefold()


class CachedCatalog(BaseModel):
    """缓存中的目录快照。"""

    model_config = ConfigDict(frozen=True)

    items: list[CatalogItem] = Field(default_factory=list)
    cached_at: datetime
    ttl_seconds: int
