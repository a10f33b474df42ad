"""Media API schemas."""

from pydantic import Field

from src.core.interfaces.http.response import ApiResponse


class WaveformResponse(ApiResponse):
    waveform: list[int] = Field(..., description="波形柱高度")
    duration: int = Field(..., description="时长（秒）")
