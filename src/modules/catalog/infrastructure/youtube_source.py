"""YouTube Data API catalog source."""

from __future__ import annotations

from datetime import datetime
from typing import Any

import httpx
from loguru import logger
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from src.core.config import settings
from src.core.domain.exceptions import UpstreamUnavailableError
from src.modules.catalog.domain.entities import CatalogItem

_UPSTREAM = "YouTube catalog"

# 缩略图优先级：高清优先，缺失时回退到默认尺寸
_THUMBNAIL_PREFERENCE = ("high", "default")


class _Thumbnail(BaseModel):
    url: str


class _Snippet(BaseModel):
    title: str = ""
    description: str = ""
    publishedAt: datetime | None = None
    channelTitle: str = ""
    thumbnails: dict[str, _Thumbnail] = Field(default_factory=dict)


class _SearchResultId(BaseModel):
    videoId: str | None = None


class _SearchResult(BaseModel):
    id: _SearchResultId
    snippet: _Snippet


class _SearchResponse(BaseModel):
    items: list[_SearchResult]


class YouTubeCatalogSource:
    """List the latest videos of one channel via the search endpoint."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        channel_id: str | None = None,
        base_url: str | None = None,
        max_results: int | None = None,
        timeout_sec: float | None = None,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.YOUTUBE_API_KEY
        self.channel_id = (
            channel_id if channel_id is not None else settings.YOUTUBE_CHANNEL_ID
        )
        self.base_url = (base_url or settings.YOUTUBE_API_BASE_URL).rstrip("/")
        self.max_results = max_results or settings.YOUTUBE_MAX_RESULTS
        self.timeout_sec = timeout_sec or settings.CATALOG_FETCH_TIMEOUT_SEC
        self.user_agent = user_agent or settings.HTTP_USER_AGENT
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.channel_id)

    async def fetch_items(self) -> list[CatalogItem]:
        """Fetch and validate the channel listing."""
        if not self.is_configured:
            raise UpstreamUnavailableError(
                _UPSTREAM, "YOUTUBE_API_KEY / YOUTUBE_CHANNEL_ID not configured"
            )

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_sec,
                transport=self._transport,
            ) as client:
                response = await client.get(
                    f"{self.base_url}/search",
                    params={
                        "part": "snippet",
                        "channelId": self.channel_id,
                        "maxResults": self.max_results,
                        "order": "date",
                        "type": "video",
                        "key": self.api_key,
                    },
                    headers={
                        "User-Agent": self.user_agent,
                        "Accept": "application/json",
                    },
                )
                response.raise_for_status()
                payload = response.json()
        except httpx.TimeoutException as exc:
            logger.warning(f"YouTube catalog fetch timeout: {exc}")
            raise UpstreamUnavailableError(_UPSTREAM, "timeout") from exc
        except httpx.HTTPStatusError as exc:
            logger.warning(
                f"YouTube catalog HTTP error: {exc.response.status_code}"
            )
            raise UpstreamUnavailableError(
                _UPSTREAM, f"HTTP {exc.response.status_code}"
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(f"YouTube catalog fetch error: {exc}")
            raise UpstreamUnavailableError(_UPSTREAM, str(exc)) from exc

        return self._parse_payload(payload)

    @classmethod
    def _parse_payload(cls, payload: Any) -> list[CatalogItem]:
        try:
            parsed = _SearchResponse.model_validate(payload)
        except PydanticValidationError as exc:
            raise UpstreamUnavailableError(
                _UPSTREAM, f"malformed payload ({exc.error_count()} errors)"
            ) from exc

        items: list[CatalogItem] = []
        for result in parsed.items:
            video_id = (result.id.videoId or "").strip()
            if not video_id:
                continue
            snippet = result.snippet
            items.append(
                CatalogItem(
                    id=video_id,
                    title=snippet.title,
                    description=snippet.description,
                    thumbnail_url=cls._pick_thumbnail(snippet.thumbnails),
                    published_at=snippet.publishedAt,
                    owner_label=snippet.channelTitle,
                )
            )
        return items

    @staticmethod
    def _pick_thumbnail(thumbnails: dict[str, _Thumbnail]) -> str:
        for variant in _THUMBNAIL_PREFERENCE:
            thumbnail = thumbnails.get(variant)
            if thumbnail is not None:
                return thumbnail.url
        return ""
