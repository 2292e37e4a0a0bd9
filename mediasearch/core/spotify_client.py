from __future__ import annotations

import time
from typing import Any, Callable

import requests
from loguru import logger
from pydantic import BaseModel, ValidationError

from .errors import AuthError, RateLimitedError, UpstreamError, parse_retry_after
from .models import AccessToken, Credentials
from .schemas import (
    Album,
    Artist,
    Markets,
    Paging,
    Playlist,
    PlaylistTrack,
    SearchResponse,
    TokenResponse,
    TopTracks,
    Track,
    parse,
)

TOKEN_URL = "https://accounts.spotify.com/api/token"
API_BASE = "https://api.spotify.com/v1"
SERVICE = "spotify"


class TokenProvider:
    """Client-credentials bearer token with a lazy expiry check.

    The cached token is replaced, never mutated. Two callers racing past an
    expired token may both refresh; whichever answer lands last is kept.
    """

    def __init__(
        self,
        credentials: Credentials | None,
        timeout_sec: int = 10,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.credentials = credentials
        self.timeout_sec = timeout_sec
        self._clock = clock
        self._token: AccessToken | None = None

    def get_token(self) -> AccessToken:
        cached = self._token
        if cached is not None and cached.is_valid(self._clock()):
            return cached
        if self.credentials is None:
            raise AuthError("Spotify client id and client secret are both required")

        logger.debug("Requesting Spotify client-credentials token")
        try:
            resp = requests.post(
                TOKEN_URL,
                data={"grant_type": "client_credentials"},
                auth=(self.credentials.client_id, self.credentials.client_secret),
                timeout=self.timeout_sec,
            )
        except requests.RequestException as exc:
            raise AuthError(f"Token request failed: {exc}") from exc
        if resp.status_code != 200:
            raise AuthError(f"Token request failed: {resp.status_code}")

        try:
            payload = resp.json()
        except ValueError as exc:
            raise AuthError("Token response was not JSON") from exc
        if not isinstance(payload, dict) or not payload.get("access_token"):
            raise AuthError("Missing access_token in Spotify response")

        try:
            body = TokenResponse.model_validate(payload)
        except ValidationError as exc:
            raise AuthError("Malformed Spotify token response") from exc
        token = AccessToken(token=body.access_token, expires_at=self._clock() + body.expires_in)
        self._token = token
        return token

    def invalidate(self) -> None:
        self._token = None


class SpotifyClient:
    def __init__(self, tokens: TokenProvider, timeout_sec: int = 10) -> None:
        self.tokens = tokens
        self.timeout_sec = timeout_sec

    def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        token = self.tokens.get_token()
        url = f"{API_BASE}{path}"
        logger.debug(f"Spotify GET {path} params={params}")
        try:
            resp = requests.get(
                url,
                headers={"Authorization": f"Bearer {token.token}"},
                params=params,
                timeout=self.timeout_sec,
            )
        except requests.RequestException as exc:
            raise UpstreamError(SERVICE, None, f"Spotify request to {path} failed: {exc}") from exc

        if resp.status_code == 429:
            raise RateLimitedError(SERVICE, parse_retry_after(resp.headers))
        if not 200 <= resp.status_code < 300:
            raise UpstreamError(SERVICE, resp.status_code, f"Spotify request to {path} failed: {resp.status_code}")
        try:
            return resp.json()
        except ValueError as exc:
            raise UpstreamError(SERVICE, resp.status_code, f"Spotify returned malformed JSON for {path}") from exc

    def _fetch(self, model: type[BaseModel], path: str, params: dict[str, Any] | None = None) -> Any:
        return parse(model, self._get(path, params), SERVICE)

    def get_track(self, track_id: str, market: str = "US") -> Track:
        return self._fetch(Track, f"/tracks/{track_id}", {"market": market})

    def get_artist(self, artist_id: str) -> Artist:
        return self._fetch(Artist, f"/artists/{artist_id}")

    def get_artist_top_tracks(self, artist_id: str, market: str = "US") -> TopTracks:
        return self._fetch(TopTracks, f"/artists/{artist_id}/top-tracks", {"market": market})

    def get_album(self, album_id: str, market: str = "US") -> Album:
        return self._fetch(Album, f"/albums/{album_id}", {"market": market})

    def get_playlist(self, playlist_id: str, market: str = "US") -> Playlist:
        return self._fetch(
            Playlist,
            f"/playlists/{playlist_id}",
            {"market": market, "fields": "id,name,description,images,owner,external_urls"},
        )

    def get_playlist_tracks(self, playlist_id: str, market: str = "US", limit: int = 100, offset: int = 0) -> Paging[PlaylistTrack]:
        return self._fetch(
            Paging[PlaylistTrack],
            f"/playlists/{playlist_id}/tracks",
            {"market": market, "limit": limit, "offset": offset},
        )

    def search(
        self,
        query: str,
        types: tuple[str, ...] = ("track", "artist", "album", "playlist"),
        market: str = "US",
        limit: int = 25,
        offset: int = 0,
    ) -> SearchResponse:
        params = {"q": query, "type": ",".join(types), "market": market, "limit": limit, "offset": offset}
        return self._fetch(SearchResponse, "/search", params)

    def get_available_markets(self) -> list[str]:
        return self._fetch(Markets, "/markets").markets

