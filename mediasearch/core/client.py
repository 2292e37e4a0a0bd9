from __future__ import annotations

from typing import Any

from loguru import logger

from .downloader import AudioDownloader
from .errors import MissingCredentialsError
from .events import SearchObserver
from .models import AudioFormat, Credentials, ResolvedQuery
from .resolver import QueryResolver
from .settings import download_config, load_settings, request_timeout, spotify_credentials, youtube_api_key
from .spotify_client import SpotifyClient, TokenProvider
from .youtube_client import YouTubeClient


class MediaSearch:
    """One object for searching Spotify/YouTube and downloading audio.

    Any service whose credentials are missing is simply left out: its
    branches of query classification become unreachable, nothing fails
    until a call actually needs it.
    """

    def __init__(
        self,
        spotify_client_id: str | None = None,
        spotify_client_secret: str | None = None,
        youtube_api_key: str | None = None,
        download_dir: str = "./downloads",
        observer: SearchObserver | None = None,
        timeout_sec: int = 10,
        downloader_binary: str = "yt-dlp",
        download_timeout_sec: int | None = None,
    ) -> None:
        self.spotify: SpotifyClient | None = None
        self.youtube: YouTubeClient | None = None

        if spotify_client_id and spotify_client_secret:
            credentials = Credentials(client_id=spotify_client_id, client_secret=spotify_client_secret)
            self.spotify = SpotifyClient(TokenProvider(credentials, timeout_sec=timeout_sec), timeout_sec=timeout_sec)
        elif spotify_client_id or spotify_client_secret:
            logger.warning("Only one of Spotify client id/secret is set; Spotify stays disabled")

        if youtube_api_key:
            self.youtube = YouTubeClient(youtube_api_key, timeout_sec=timeout_sec)

        self.resolver = QueryResolver(spotify=self.spotify, youtube=self.youtube, observer=observer)
        self.downloader = AudioDownloader(download_dir, binary=downloader_binary, timeout_sec=download_timeout_sec)

    @classmethod
    def from_settings(cls, settings: dict[str, Any] | None = None, observer: SearchObserver | None = None) -> "MediaSearch":
        runtime_settings = settings if settings is not None else load_settings()
        client_id, client_secret = spotify_credentials(runtime_settings)
        download_dir, binary, download_timeout = download_config(runtime_settings)
        return cls(
            spotify_client_id=client_id,
            spotify_client_secret=client_secret,
            youtube_api_key=youtube_api_key(runtime_settings),
            download_dir=download_dir,
            observer=observer,
            timeout_sec=max(request_timeout(runtime_settings, "spotify"), request_timeout(runtime_settings, "youtube")),
            downloader_binary=binary,
            download_timeout_sec=download_timeout,
        )

    @property
    def download_path(self) -> str:
        return str(self.downloader.download_dir)

    def search(self, query: str, market: str = "US") -> ResolvedQuery:
        return self.resolver.search(query, market=market)

    def download_audio(self, query: str, audio_format: AudioFormat = "best") -> str:
        return self.downloader.download_audio(query, audio_format)

    def get_available_markets(self) -> list[str]:
        if self.spotify is None:
            raise MissingCredentialsError("Spotify credentials are not configured")
        return self.spotify.get_available_markets()
