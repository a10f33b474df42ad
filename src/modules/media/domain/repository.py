"""Waveform store port."""

from typing import Protocol

from src.modules.media.domain.entities import Waveform


class WaveformStore(Protocol):
    """Port for waveforms stored alongside uploaded content."""

    async def get(self, item_id: str) -> Waveform | None: ...

    async def save(self, item_id: str, waveform: Waveform) -> bool: ...
