"""Tests for YouTube catalog source."""

import httpx
import pytest

from src.core.domain.exceptions import UpstreamUnavailableError
from src.modules.catalog.infrastructure.youtube_source import YouTubeCatalogSource

pytestmark = pytest.mark.anyio


def _search_payload() -> dict:
    return {
        "kind": "youtube#searchListResponse",
        "items": [
            {
                "id": {"kind": "youtube#video", "videoId": "abc123"},
                "snippet": {
                    "title": "DJ BBOY Live Mix",
                    "description": "Recorded live",
                    "publishedAt": "2024-05-01T18:30:00Z",
                    "channelTitle": "DJ BBOY",
                    "thumbnails": {
                        "default": {"url": "https://i.ytimg.com/vi/abc123/default.jpg"},
                        "high": {"url": "https://i.ytimg.com/vi/abc123/hqdefault.jpg"},
                    },
                },
            },
            {
                "id": {"kind": "youtube#video", "videoId": "def456"},
                "snippet": {
                    "title": "Second Mix",
                    "description": "",
                    "publishedAt": "2024-04-01T10:00:00Z",
                    "channelTitle": "DJ BBOY",
                    "thumbnails": {
                        "default": {"url": "https://i.ytimg.com/vi/def456/default.jpg"},
                    },
                },
            },
            {
                "id": {"kind": "youtube#channel", "channelId": "UC-test-channel"},
                "snippet": {"title": "DJ BBOY", "thumbnails": {}},
            },
        ],
    }


def _source(handler) -> YouTubeCatalogSource:
    return YouTubeCatalogSource(
        api_key="yt-test-key",
        channel_id="UC-test-channel",
        base_url="https://youtube.test/v3",
        transport=httpx.MockTransport(handler),
    )


async def test_fetch_items_maps_payload() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=_search_payload())

    items = await _source(handler).fetch_items()

    assert [item.id for item in items] == ["abc123", "def456"]
    assert items[0].thumbnail_url.endswith("/hqdefault.jpg")
    assert items[1].thumbnail_url.endswith("/default.jpg")
    assert items[0].owner_label == "DJ BBOY"
    assert items[0].published_at is not None
    assert items[0].published_at.year == 2024

    params = seen[0].url.params
    assert seen[0].url.path == "/v3/search"
    assert params["channelId"] == "UC-test-channel"
    assert params["maxResults"] == "50"
    assert params["order"] == "date"
    assert params["type"] == "video"
    assert params["key"] == "yt-test-key"


async def test_payload_without_items_is_rejected() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"error": {"message": "quota"}})

    with pytest.raises(UpstreamUnavailableError, match="malformed payload"):
        await _source(handler).fetch_items()


async def test_http_error_is_upstream_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"error": "forbidden"})

    with pytest.raises(UpstreamUnavailableError, match="HTTP 403"):
        await _source(handler).fetch_items()


async def test_timeout_is_upstream_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(UpstreamUnavailableError, match="timeout"):
        await _source(handler).fetch_items()


async def test_non_json_body_is_upstream_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>oops</html>")

    with pytest.raises(UpstreamUnavailableError):
        await _source(handler).fetch_items()


async def test_unconfigured_source_does_not_call_upstream() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(200, json=_search_payload())

    source = YouTubeCatalogSource(
        api_key="",
        channel_id="UC-test-channel",
        transport=httpx.MockTransport(handler),
    )

    with pytest.raises(UpstreamUnavailableError, match="not configured"):
        await source.fetch_items()
    assert calls == 0


async def test_configured_user_agent_is_sent() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=_search_payload())

    source = YouTubeCatalogSource(
        api_key="yt-test-key",
        channel_id="UC-test-channel",
        base_url="https://youtube.test/v3",
        user_agent="mixhub-tests/1.0",
        transport=httpx.MockTransport(handler),
    )
    await source.fetch_items()

    assert seen[0].headers["user-agent"] == "mixhub-tests/1.0"
