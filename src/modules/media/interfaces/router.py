"""Media API routes."""

from fastapi import APIRouter, Depends

from src.modules.media.application.dependencies import get_waveform_service
from src.modules.media.application.services import WaveformService
from src.modules.media.interfaces.schemas import WaveformResponse

router = APIRouter(tags=["media"])


@router.get(
    "/waveform/{video_id}",
    response_model=WaveformResponse,
    summary="获取波形数据",
    description="上传内容返回已存储的波形；外部视频返回随机占位波形",
)
async def get_waveform(
    video_id: str,
    service: WaveformService = Depends(get_waveform_service),
) -> WaveformResponse:
    waveform = await service.get_waveform(video_id)
    return WaveformResponse(
        waveform=waveform.samples,
        duration=waveform.duration_sec,
    )
