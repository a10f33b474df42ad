"""Media module application dependencies."""

from typing import NoReturn

from fastapi import Depends

from src.core.application.dependencies import get_settings
from src.core.config import Settings
from src.modules.media.application.services import WaveformService
from src.modules.media.domain.repository import WaveformStore


def _missing_dependency(name: str) -> NoReturn:
    raise RuntimeError(f"Missing dependency override for {name}")


async def get_waveform_store() -> WaveformStore:
    _missing_dependency("WaveformStore")


async def get_waveform_service(
    store: WaveformStore = Depends(get_waveform_store),
    config: Settings = Depends(get_settings),
) -> WaveformService:
    return WaveformService(
        store,
        sample_count=config.WAVEFORM_SAMPLES,
        default_duration_sec=config.WAVEFORM_DEFAULT_DURATION_SEC,
    )
