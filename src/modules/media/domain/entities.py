"""Waveform domain models."""

from pydantic import BaseModel, ConfigDict, Field


class Waveform(BaseModel):
    """波形采样数据（仅用于可视化，不是音频分析结果）。"""

    model_config = ConfigDict(frozen=True)

    samples: list[int] = Field(..., description="波形柱高度")
    duration_sec: int = Field(..., ge=0, description="时长（秒）")
    generated: bool = Field(default=False, description="是否为随机占位数据")
