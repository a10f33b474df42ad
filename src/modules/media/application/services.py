"""Waveform application service."""

from __future__ import annotations

import random

from src.core.domain.exceptions import ValidationError
from src.modules.media.domain.entities import Waveform
from src.modules.media.domain.repository import WaveformStore

# 占位波形柱高度范围 [20, 100)
_MIN_BAR = 20
_MAX_BAR = 100


class WaveformService:
    """Stored waveform when one exists, random placeholder otherwise."""

    def __init__(
        self,
        store: WaveformStore,
        *,
        sample_count: int,
        default_duration_sec: int,
        rng: random.Random | None = None,
    ) -> None:
        self.store = store
        self.rng = rng or random.Random()
        self.sample_count = sample_count
        self.default_duration_sec = default_duration_sec

    async def get_waveform(self, item_id: str) -> Waveform:
        stored = await self.store.get(item_id)
        if stored is not None:
            return stored
        return Waveform(
            samples=[
                self.rng.randrange(_MIN_BAR, _MAX_BAR)
                for _ in range(self.sample_count)
            ],
            duration_sec=self.default_duration_sec,
            generated=True,
        )

    async def save_waveform(
        self,
        item_id: str,
        samples: list[int],
        duration_sec: int | None = None,
    ) -> Waveform:
        """Store a waveform computed by the upload pipeline.

        上传与文件存储不在本服务内实现；外部上传协作方在分析完音频后调用此方法写入，
        之后 get_waveform 对同一 ID 返回存储的数据而不是随机占位波形。
        本仓库内没有 HTTP 路由调用它。
        """
        if not samples:
            raise ValidationError("Waveform samples must not be empty")
        waveform = Waveform(
            samples=samples,
            duration_sec=duration_sec or self.default_duration_sec,
        )
        await self.store.save(item_id, waveform)
        return waveform
