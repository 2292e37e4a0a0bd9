from __future__ import annotations

from typing import Any, Literal

import requests
from loguru import logger
from pydantic import ValidationError

from .errors import RateLimitedError, UpstreamError, VideoServiceError, parse_retry_after
from .schemas import ApiErrorResponse, PlaylistItemsResponse, PlaylistsResponse, VideoSearchResponse, parse

API_BASE = "https://www.googleapis.com/youtube/v3"
SERVICE = "youtube"
RATE_LIMIT_REASONS = frozenset({"rateLimitExceeded", "userRateLimitExceeded"})


def _error_reasons(resp: Any) -> set[str]:
    try:
        body = ApiErrorResponse.model_validate(resp.json())
    except (ValueError, ValidationError):
        return set()
    return {detail.reason for detail in body.error.errors if detail.reason}


def raise_for_youtube_status(resp: Any, endpoint: str) -> None:
    """Map a non-2xx YouTube answer onto the error taxonomy."""
    status = resp.status_code
    if 200 <= status < 300:
        return
    if status == 403:
        if _error_reasons(resp) & RATE_LIMIT_REASONS:
            raise RateLimitedError(SERVICE, parse_retry_after(resp.headers))
        raise VideoServiceError(403, "YouTube API access denied (check quota, billing, or project permissions).")
    raise UpstreamError(SERVICE, status, f"YouTube request to {endpoint} failed: {status}")


class YouTubeClient:
    def __init__(self, api_key: str, timeout_sec: int = 10) -> None:
        self.api_key = api_key
        self.timeout_sec = timeout_sec

    def _get(self, endpoint: str, params: dict[str, Any]) -> Any:
        logger.debug(f"YouTube GET /{endpoint} params={params}")
        try:
            resp = requests.get(
                f"{API_BASE}/{endpoint}",
                params={**params, "key": self.api_key},
                timeout=self.timeout_sec,
            )
        except requests.RequestException as exc:
            raise UpstreamError(SERVICE, None, f"YouTube request to {endpoint} failed: {exc}") from exc

        raise_for_youtube_status(resp, endpoint)
        try:
            return resp.json()
        except ValueError as exc:
            raise UpstreamError(SERVICE, resp.status_code, f"YouTube returned malformed JSON for {endpoint}") from exc

    def search(self, query: str, kind: Literal["video", "playlist"] = "video", max_results: int = 1) -> VideoSearchResponse:
        params = {"q": query, "part": "snippet", "type": kind, "maxResults": max_results}
        return parse(VideoSearchResponse, self._get("search", params), SERVICE)

    def get_playlist(self, playlist_id: str) -> PlaylistsResponse:
        params = {"id": playlist_id, "part": "snippet,contentDetails", "maxResults": 1}
        return parse(PlaylistsResponse, self._get("playlists", params), SERVICE)

    def get_playlist_items(self, playlist_id: str, page_token: str | None = None, max_results: int = 50) -> PlaylistItemsResponse:
        params: dict[str, Any] = {"playlistId": playlist_id, "part": "snippet", "maxResults": max_results}
        if page_token is not None:
            params["pageToken"] = page_token
        return parse(PlaylistItemsResponse, self._get("playlistItems", params), SERVICE)
