"""Waveform store backed by the response cache."""

from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from src.core.domain.ports.response_cache import ResponseCache
from src.core.infrastructure.redis.keys import CacheKeys
from src.modules.media.domain.entities import Waveform


class CacheWaveformStore:
    """Keep waveforms under waveform:{item_id} without expiry.

    使用 no-op 缓存时所有读取都未命中，调用方会回退到随机占位波形。
    """

    def __init__(self, cache: ResponseCache) -> None:
        self.cache = cache

    async def get(self, item_id: str) -> Waveform | None:
        raw = await self.cache.get(CacheKeys.waveform(item_id))
        if raw is None:
            return None
        try:
            return Waveform.model_validate_json(raw)
        except PydanticValidationError as exc:
            logger.warning(f"Ignoring unreadable waveform for {item_id}: {exc}")
            return None

    async def save(self, item_id: str, waveform: Waveform) -> bool:
        stored = waveform.model_copy(update={"generated": False})
        return await self.cache.set(
            CacheKeys.waveform(item_id), stored.model_dump_json(), None
        )
