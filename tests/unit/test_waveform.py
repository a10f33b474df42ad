"""Tests for waveform service and store."""

import random

import pytest

from src.core.domain.exceptions import ValidationError
from src.core.infrastructure.cache import InMemoryResponseCache, NullResponseCache
from src.core.infrastructure.redis.keys import CacheKeys
from src.modules.media.application.services import WaveformService
from src.modules.media.domain.entities import Waveform
from src.modules.media.infrastructure.waveform_store import CacheWaveformStore

pytestmark = pytest.mark.anyio


def _service(cache) -> WaveformService:
    return WaveformService(
        CacheWaveformStore(cache),
        rng=random.Random(42),
        sample_count=100,
        default_duration_sec=180,
    )


async def test_placeholder_waveform_has_bounded_samples() -> None:
    waveform = await _service(InMemoryResponseCache()).get_waveform("vid-1")

    assert waveform.generated is True
    assert waveform.duration_sec == 180
    assert len(waveform.samples) == 100
    assert all(20 <= value < 100 for value in waveform.samples)


async def test_placeholder_is_not_persisted() -> None:
    cache = InMemoryResponseCache()

    await _service(cache).get_waveform("vid-1")

    assert await cache.get(CacheKeys.waveform("vid-1")) is None


async def test_stored_waveform_is_returned_verbatim() -> None:
    service = _service(InMemoryResponseCache())

    await service.save_waveform("vid-1", [1, 2, 3, 4], duration_sec=3492)
    waveform = await service.get_waveform("vid-1")

    assert waveform == Waveform(samples=[1, 2, 3, 4], duration_sec=3492)
    assert waveform.generated is False


async def test_saving_empty_samples_is_rejected() -> None:
    with pytest.raises(ValidationError):
        await _service(InMemoryResponseCache()).save_waveform("vid-1", [])


async def test_unreadable_stored_value_falls_back_to_placeholder() -> None:
    cache = InMemoryResponseCache()
    await cache.set(CacheKeys.waveform("vid-1"), '{"samples": "nope"}', None)

    waveform = await _service(cache).get_waveform("vid-1")

    assert waveform.generated is True


async def test_noop_cache_always_generates() -> None:
    service = _service(NullResponseCache())

    await service.save_waveform("vid-1", [5, 6, 7])

    assert (await service.get_waveform("vid-1")).generated is True
