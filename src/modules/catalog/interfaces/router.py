"""Catalog API routes."""

from fastapi import APIRouter, Depends, Query

from src.modules.catalog.application.dependencies import get_catalog_service
from src.modules.catalog.application.services import CatalogService
from src.modules.catalog.interfaces.schemas import (
    ChannelVideosResponse,
    SearchResponse,
    VideoResponse,
)

router = APIRouter(tags=["catalog"])


@router.get(
    "/channel/videos",
    response_model=ChannelVideosResponse,
    summary="获取频道视频列表",
    description="返回缓存的频道目录；上游不可用时返回空列表",
)
async def list_channel_videos(
    service: CatalogService = Depends(get_catalog_service),
) -> ChannelVideosResponse:
    """List the channel catalog."""
    items = await service.list_channel_items()
    return ChannelVideosResponse(
        videos=[VideoResponse.from_item(item) for item in items],
        total=len(items),
        channel_id=service.source.channel_id,
    )


@router.get(
    "/search",
    response_model=SearchResponse,
    summary="搜索频道视频",
    description="按标题或简介做不区分大小写的子串匹配，保持目录顺序",
)
async def search_videos(
    q: str = Query("", max_length=200, description="搜索关键词"),
    service: CatalogService = Depends(get_catalog_service),
) -> SearchResponse:
    """Search the channel catalog."""
    items = await service.search(q)
    return SearchResponse(
        videos=[VideoResponse.from_item(item) for item in items],
        total=len(items),
        query=q,
    )
