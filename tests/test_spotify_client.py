from __future__ import annotations

import pytest
import requests

from mediasearch.core.errors import AuthError, RateLimitedError, SchemaError, UpstreamError
from mediasearch.core.models import Credentials
from mediasearch.core.spotify_client import SpotifyClient, TokenProvider


class _Resp:
    def __init__(self, status_code: int, payload: dict | None = None, headers: dict | None = None) -> None:
        self.status_code = status_code
        self._payload = payload or {}
        self.headers = headers or {}

    def json(self):
        return self._payload


class _Clock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _provider(clock: _Clock | None = None) -> TokenProvider:
    return TokenProvider(Credentials(client_id="id", client_secret="secret"), clock=clock or _Clock())


def test_get_token_missing_credentials() -> None:
    with pytest.raises(AuthError) as exc:
        TokenProvider(None).get_token()
    assert exc.value.code == "SPOTIFY_AUTH_FAILED"


def test_get_token_success_sends_client_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: dict = {}

    def fake_post(url, **kwargs):
        seen["url"] = url
        seen.update(kwargs)
        return _Resp(200, {"access_token": "abc", "expires_in": 3600})

    monkeypatch.setattr("mediasearch.core.spotify_client.requests.post", fake_post)
    token = _provider(_Clock(1000.0)).get_token()

    assert token.token == "abc"
    assert token.expires_at == 4600.0
    assert seen["url"] == "https://accounts.spotify.com/api/token"
    assert seen["data"] == {"grant_type": "client_credentials"}
    assert seen["auth"] == ("id", "secret")


def test_get_token_reused_until_expiry(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[int] = []

    def fake_post(*args, **kwargs):
        calls.append(1)
        return _Resp(200, {"access_token": f"tok{len(calls)}", "expires_in": 60})

    monkeypatch.setattr("mediasearch.core.spotify_client.requests.post", fake_post)
    clock = _Clock(0.0)
    provider = _provider(clock)

    assert provider.get_token().token == "tok1"
    clock.now = 59.0
    assert provider.get_token().token == "tok1"
    assert len(calls) == 1

    clock.now = 60.0
    assert provider.get_token().token == "tok2"
    assert len(calls) == 2


def test_get_token_non_success_status(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "mediasearch.core.spotify_client.requests.post",
        lambda *args, **kwargs: _Resp(401, {"error": "invalid_client"}),
    )
    with pytest.raises(AuthError) as exc:
        _provider().get_token()
    assert "401" in exc.value.message


def test_get_token_missing_access_token(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "mediasearch.core.spotify_client.requests.post",
        lambda *args, **kwargs: _Resp(200, {"token_type": "Bearer"}),
    )
    with pytest.raises(AuthError):
        _provider().get_token()


def test_get_token_transport_failure_is_chained(monkeypatch: pytest.MonkeyPatch) -> None:
    def boom(*args, **kwargs):
        raise requests.ConnectionError("down")

    monkeypatch.setattr("mediasearch.core.spotify_client.requests.post", boom)
    with pytest.raises(AuthError) as exc:
        _provider().get_token()
    assert isinstance(exc.value.__cause__, requests.ConnectionError)


def _client(monkeypatch: pytest.MonkeyPatch) -> SpotifyClient:
    monkeypatch.setattr(
        "mediasearch.core.spotify_client.requests.post",
        lambda *args, **kwargs: _Resp(200, {"access_token": "abc", "expires_in": 3600}),
    )
    return SpotifyClient(_provider())


def test_get_track_sends_bearer_and_market(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: dict = {}

    def fake_get(url, **kwargs):
        seen["url"] = url
        seen.update(kwargs)
        return _Resp(200, {"id": "t1", "name": "Song", "duration_ms": 1000})

    client = _client(monkeypatch)
    monkeypatch.setattr("mediasearch.core.spotify_client.requests.get", fake_get)

    track = client.get_track("t1", market="GB")
    assert track.name == "Song"
    assert seen["url"] == "https://api.spotify.com/v1/tracks/t1"
    assert seen["headers"] == {"Authorization": "Bearer abc"}
    assert seen["params"] == {"market": "GB"}


def test_rate_limit_maps_retry_after(monkeypatch: pytest.MonkeyPatch) -> None:
    client = _client(monkeypatch)
    monkeypatch.setattr(
        "mediasearch.core.spotify_client.requests.get",
        lambda *args, **kwargs: _Resp(429, headers={"Retry-After": "5"}),
    )
    with pytest.raises(RateLimitedError) as exc:
        client.get_artist("a1")
    assert exc.value.service == "spotify"
    assert exc.value.retry_after_seconds == 5


def test_non_success_status_is_upstream_error(monkeypatch: pytest.MonkeyPatch) -> None:
    client = _client(monkeypatch)
    monkeypatch.setattr(
        "mediasearch.core.spotify_client.requests.get",
        lambda *args, **kwargs: _Resp(404, {"error": {"status": 404}}),
    )
    with pytest.raises(UpstreamError) as exc:
        client.get_album("x")
    assert exc.value.service == "spotify"
    assert exc.value.status == 404


def test_transport_failure_is_upstream_error(monkeypatch: pytest.MonkeyPatch) -> None:
    client = _client(monkeypatch)

    def boom(*args, **kwargs):
        raise requests.Timeout("slow")

    monkeypatch.setattr("mediasearch.core.spotify_client.requests.get", boom)
    with pytest.raises(UpstreamError) as exc:
        client.get_track("t1")
    assert exc.value.status is None
    assert isinstance(exc.value.__cause__, requests.Timeout)


def test_unexpected_shape_raises_schema_error(monkeypatch: pytest.MonkeyPatch) -> None:
    client = _client(monkeypatch)
    monkeypatch.setattr(
        "mediasearch.core.spotify_client.requests.get",
        lambda *args, **kwargs: _Resp(200, {"id": "t1"}),
    )
    with pytest.raises(SchemaError) as exc:
        client.get_track("t1")
    assert exc.value.service == "spotify"


def test_search_requests_combined_types(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: dict = {}

    def fake_get(url, **kwargs):
        seen.update(kwargs)
        return _Resp(
            200,
            {
                "tracks": {"items": [{"id": "t1", "name": "Song"}], "offset": 0, "limit": 25, "total": 1},
                "playlists": {"items": [None, {"id": "p1", "name": "Mix"}], "offset": 0, "limit": 25, "total": 2},
                "audiobooks": {"items": [{"id": "b1"}]},
            },
        )

    client = _client(monkeypatch)
    monkeypatch.setattr("mediasearch.core.spotify_client.requests.get", fake_get)

    out = client.search("lofi", market="US")
    assert seen["params"] == {"q": "lofi", "type": "track,artist,album,playlist", "market": "US", "limit": 25, "offset": 0}
    assert out.tracks is not None and out.tracks.items[0].id == "t1"
    assert out.playlists is not None and [p.id for p in out.playlists.items] == ["p1"]
    assert "audiobooks" not in out.model_dump()


def test_get_available_markets(monkeypatch: pytest.MonkeyPatch) -> None:
    client = _client(monkeypatch)
    monkeypatch.setattr(
        "mediasearch.core.spotify_client.requests.get",
        lambda *args, **kwargs: _Resp(200, {"markets": ["US", "UA"]}),
    )
    assert client.get_available_markets() == ["US", "UA"]
