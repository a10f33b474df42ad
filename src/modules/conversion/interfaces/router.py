"""Conversion API routes."""

from fastapi import APIRouter, Depends, Header, Query, status
from fastapi.responses import RedirectResponse

from src.core.domain.exceptions import UpstreamUnavailableError
from src.modules.catalog.application.dependencies import get_catalog_service
from src.modules.catalog.application.services import CatalogService
from src.modules.conversion.application.dependencies import get_conversion_gateway
from src.modules.conversion.application.services import ConversionGateway
from src.modules.conversion.interfaces.schemas import (
    DownloadLinkSchema,
    DownloadOptionsResponse,
    DownloadOptionsSchema,
    DownloadResponse,
    DownloadVideoSchema,
)

router = APIRouter(tags=["conversion"])


@router.get(
    "/download/options/{video_id}",
    response_model=DownloadOptionsResponse,
    summary="获取下载格式菜单",
    description="静态菜单，与视频无关",
)
async def get_download_options(
    video_id: str,
    gateway: ConversionGateway = Depends(get_conversion_gateway),
) -> DownloadOptionsResponse:
    """Static format menu."""
    options = gateway.get_download_options(video_id)
    return DownloadOptionsResponse(
        video_id=video_id,
        options=DownloadOptionsSchema.from_options(options),
    )


@router.get(
    "/download/{video_id}",
    response_model=DownloadResponse,
    summary="转换并获取下载链接",
    description="每次请求都会调用转换服务，不做缓存",
)
async def download_video(
    video_id: str,
    format: str = Query("audio", description="媒体类型：audio 或 video"),
    quality: str = Query("320kbps", description="质量档位"),
    catalog: CatalogService = Depends(get_catalog_service),
    gateway: ConversionGateway = Depends(get_conversion_gateway),
) -> DownloadResponse:
    """Trigger a conversion for a catalog video."""
    gateway.build_request(video_id, format, quality)
    video = await catalog.get_item(video_id)

    outcome = await gateway.convert(video_id, format, quality)
    if not outcome.is_success or outcome.result is None:
        raise UpstreamUnavailableError(
            "Download service", outcome.error_message or "conversion failed"
        )

    result = outcome.result
    return DownloadResponse(
        video=DownloadVideoSchema(
            video_id=video.id,
            title=video.title,
            thumbnail=video.thumbnail_url,
            channel=video.owner_label,
        ),
        download=DownloadLinkSchema(
            url=result.download_url,
            format=result.media_kind.value,
            quality=result.resolved_quality,
            duration=result.duration,
            expires=result.expires_at,
        ),
    )


@router.get(
    "/stream/{video_id}",
    status_code=status.HTTP_302_FOUND,
    response_class=RedirectResponse,
    summary="跳转到可播放地址",
    description=(
        "整段跳转到新获取的音频直链。带 Range 头时声明 Accept-Ranges，"
        "但不做字节区间切片。"
    ),
)
async def stream_video(
    video_id: str,
    range_header: str | None = Header(None, alias="Range"),
    gateway: ConversionGateway = Depends(get_conversion_gateway),
) -> RedirectResponse:
    """Redirect the audio element to a playable URL."""
    target = await gateway.stream(video_id, range_header)
    response = RedirectResponse(target.url, status_code=status.HTTP_302_FOUND)
    if target.range_requested:
        # TODO: proxy and slice the upstream body to honour Range for real seeking
        response.headers["Accept-Ranges"] = "bytes"
        response.headers["Content-Type"] = "audio/mpeg"
    return response
