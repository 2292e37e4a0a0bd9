from __future__ import annotations

import pytest

from mediasearch.core.errors import RateLimitedError, UpstreamError, VideoServiceError
from mediasearch.core.youtube_client import YouTubeClient


class _Resp:
    def __init__(self, status_code: int, payload: dict | None = None, headers: dict | None = None) -> None:
        self.status_code = status_code
        self._payload = payload or {}
        self.headers = headers or {}

    def json(self):
        return self._payload


def _quota_error(reason: str) -> dict:
    return {"error": {"code": 403, "message": "denied", "errors": [{"reason": reason, "message": "denied"}]}}


def test_search_sends_key_and_max_results(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: dict = {}

    def fake_get(url, **kwargs):
        seen["url"] = url
        seen.update(kwargs)
        return _Resp(
            200,
            {
                "items": [
                    {
                        "id": {"kind": "youtube#video", "videoId": "dQw4w9WgXcQ"},
                        "snippet": {"title": "Song", "channelTitle": "Channel"},
                    }
                ]
            },
        )

    monkeypatch.setattr("mediasearch.core.youtube_client.requests.get", fake_get)
    out = YouTubeClient("key").search("lofi beats", kind="video", max_results=1)

    assert out.items[0].id.video_id == "dQw4w9WgXcQ"
    assert out.items[0].snippet.channel_title == "Channel"
    assert seen["url"] == "https://www.googleapis.com/youtube/v3/search"
    assert seen["params"] == {"q": "lofi beats", "part": "snippet", "type": "video", "maxResults": 1, "key": "key"}


def test_rate_limited_403_with_retry_after(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "mediasearch.core.youtube_client.requests.get",
        lambda *args, **kwargs: _Resp(403, _quota_error("rateLimitExceeded"), headers={"retry-after": "30"}),
    )
    with pytest.raises(RateLimitedError) as exc:
        YouTubeClient("key").search("x")
    assert exc.value.retry_after_seconds == 30
    assert exc.value.service == "youtube"
    assert not isinstance(exc.value, VideoServiceError)


def test_rate_limited_403_without_retry_after(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "mediasearch.core.youtube_client.requests.get",
        lambda *args, **kwargs: _Resp(403, _quota_error("userRateLimitExceeded")),
    )
    with pytest.raises(RateLimitedError) as exc:
        YouTubeClient("key").get_playlist("PLx")
    assert exc.value.retry_after_seconds is None


def test_other_403_is_video_service_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "mediasearch.core.youtube_client.requests.get",
        lambda *args, **kwargs: _Resp(403, _quota_error("forbidden")),
    )
    with pytest.raises(VideoServiceError) as exc:
        YouTubeClient("key").search("x")
    assert exc.value.status == 403


def test_other_status_is_upstream_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "mediasearch.core.youtube_client.requests.get",
        lambda *args, **kwargs: _Resp(500),
    )
    with pytest.raises(UpstreamError) as exc:
        YouTubeClient("key").get_playlist_items("PLx")
    assert exc.value.status == 500
    assert exc.value.service == "youtube"
    assert not isinstance(exc.value, VideoServiceError)


def test_playlist_items_passes_page_token(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: dict = {}

    def fake_get(url, **kwargs):
        seen.update(kwargs)
        return _Resp(200, {"items": [], "nextPageToken": "NEXT"})

    monkeypatch.setattr("mediasearch.core.youtube_client.requests.get", fake_get)
    out = YouTubeClient("key").get_playlist_items("PLx", page_token="TOKEN")

    assert out.next_page_token == "NEXT"
    assert seen["params"]["pageToken"] == "TOKEN"
    assert seen["params"]["playlistId"] == "PLx"
