"""Classify a query and turn it into one normalized ``ResolvedQuery``.

Classification order, first match wins:

1. a Spotify track/artist/album/playlist link, when Spotify is configured;
2. a YouTube video or playlist link, when YouTube is configured;
3. free text searched on Spotify (tracks, artists, albums, playlists);
4. free text looked up as a single YouTube video;
5. otherwise ``MissingCredentialsError``.

A Spotify-style link that fails the credential gate falls through to the
YouTube checks and then to free-text search.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from .errors import InternalError, MissingCredentialsError, NotFoundError
from .events import LoggingObserver, SearchObserver
from .models import (
    AlbumResult,
    AlbumSummary,
    AlbumTrackSummary,
    ArtistResult,
    ArtistSummary,
    ArtistTrackSummary,
    OwnerSummary,
    PlaylistResult,
    PlaylistSummary,
    PlaylistTrackSummary,
    PlaylistVideoSummary,
    ResolvedQuery,
    SearchResult,
    TrackResult,
    TrackSummary,
    VideoPlaylistResult,
    VideoPlaylistSummary,
    VideoResult,
    VideoSummary,
)
from .schemas import PlaylistItem, PlaylistTrack
from .spotify_client import SpotifyClient
from .youtube_client import YouTubeClient

SPOTIFY_LINK_RE = re.compile(
    r"https://open\.spotify\.com/(?:intl-[a-zA-Z-]+/)?(track|artist|album|playlist)/([a-zA-Z0-9]{22})"
)
YOUTUBE_LINK_RE = re.compile(
    r"(?:https?://)?(?:www\.|m\.|music\.)?"
    r"(?:youtube\.com/(?:.*[?&](?:v=|list=)|playlist\?list=)|youtu\.be/)"
    r"([^\"&?/#\s]{11,34})"
)
# Local guess only; an id that merely starts with one of these is still
# treated as a playlist.
PLAYLIST_ID_PREFIXES = ("PL", "UU", "RD")

SOURCE_TAGS = {"spotify": "[Spotify]", "youtube": "[YouTube]"}
SEARCH_TYPES = ("track", "artist", "album", "playlist")
SEARCH_LIMIT = 25
PLAYLIST_PAGE_SIZE = 100
VIDEO_PLAYLIST_PAGE_SIZE = 50


@dataclass(frozen=True)
class Classification:
    source: str
    kind: str
    value: str


def classify(query: str, spotify_enabled: bool, youtube_enabled: bool) -> Classification:
    """Decide where ``query`` goes without touching the network."""
    spotify_match = SPOTIFY_LINK_RE.search(query)
    if spotify_match and spotify_enabled:
        return Classification("spotify", spotify_match.group(1), spotify_match.group(2))

    youtube_match = YOUTUBE_LINK_RE.search(query)
    if youtube_match and youtube_enabled:
        video_or_playlist_id = youtube_match.group(1)
        if video_or_playlist_id.startswith(PLAYLIST_ID_PREFIXES):
            return Classification("youtube", "video_playlist", video_or_playlist_id)
        return Classification("youtube", "video", video_or_playlist_id)

    if spotify_enabled:
        return Classification("spotify", "search", query)
    if youtube_enabled:
        return Classification("youtube", "video", query)
    raise MissingCredentialsError(
        "Either both Spotify clientId and clientSecret must be provided, or a YouTube API key must be provided."
    )


def _watch_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"


class QueryResolver:
    def __init__(
        self,
        spotify: SpotifyClient | None = None,
        youtube: YouTubeClient | None = None,
        observer: SearchObserver | None = None,
    ) -> None:
        self.spotify = spotify
        self.youtube = youtube
        self.observer = observer or LoggingObserver()
        self._handlers: dict[tuple[str, str], Callable[[str, str], ResolvedQuery]] = {
            ("spotify", "search"): self._spotify_search,
            ("spotify", "track"): self._track,
            ("spotify", "artist"): self._artist,
            ("spotify", "album"): self._album,
            ("spotify", "playlist"): self._playlist,
            ("youtube", "video"): self._video,
            ("youtube", "video_playlist"): self._video_playlist,
        }

    def search(self, query: str, market: str = "US") -> ResolvedQuery:
        try:
            classification = classify(query, self.spotify is not None, self.youtube is not None)
            self.observer.on_debug(
                SOURCE_TAGS[classification.source],
                f"Query: {query} | Kind: {classification.kind} | Value: {classification.value}",
            )
            handler = self._handlers.get((classification.source, classification.kind))
            if handler is None:
                raise InternalError(f"Unsupported {classification.source} type: {classification.kind}")
            return handler(classification.value, market)
        except Exception as exc:
            self.observer.on_error(exc)
            raise

    # -- Spotify --

    def _spotify_client(self) -> SpotifyClient:
        if self.spotify is None:
            raise MissingCredentialsError("Spotify credentials are not configured")
        return self.spotify

    def _youtube_client(self) -> YouTubeClient:
        if self.youtube is None:
            raise MissingCredentialsError("YouTube API key is not configured")
        return self.youtube

    def _spotify_search(self, query: str, market: str) -> SearchResult:
        response = self._spotify_client().search(query, types=SEARCH_TYPES, market=market, limit=SEARCH_LIMIT, offset=0)
        return SearchResult(data=response)

    def _track(self, track_id: str, market: str) -> TrackResult:
        track = self._spotify_client().get_track(track_id, market)
        return TrackResult(
            data=TrackSummary(
                type=track.type,
                id=track.id,
                name=track.name,
                artists=track.artists,
                images=track.album.images,
                duration_ms=track.duration_ms,
                url=track.external_urls.spotify,
            )
        )

    def _artist(self, artist_id: str, market: str) -> ArtistResult:
        client = self._spotify_client()
        artist = client.get_artist(artist_id)
        top = client.get_artist_top_tracks(artist_id, market)
        return ArtistResult(
            data=ArtistSummary(
                id=artist.id,
                name=artist.name,
                images=artist.images,
                url=artist.external_urls.spotify,
                tracks=[
                    ArtistTrackSummary(
                        id=track.id,
                        name=track.name,
                        artists=", ".join(a.name for a in track.artists),
                        images=track.album.images,
                        duration_ms=track.duration_ms,
                        url=track.external_urls.spotify,
                    )
                    for track in top.tracks
                ],
            )
        )

    def _album(self, album_id: str, market: str) -> AlbumResult:
        album = self._spotify_client().get_album(album_id, market)
        # Album tracks keep the nested artist objects, unlike artist top tracks.
        return AlbumResult(
            data=AlbumSummary(
                id=album.id,
                name=album.name,
                images=album.images,
                url=album.external_urls.spotify,
                tracks=[
                    AlbumTrackSummary(
                        id=track.id,
                        name=track.name,
                        artists=track.artists,
                        duration_ms=track.duration_ms,
                        url=track.external_urls.spotify,
                    )
                    for track in album.tracks.items
                ],
            )
        )

    def _playlist(self, playlist_id: str, market: str) -> PlaylistResult:
        client = self._spotify_client()
        playlist = client.get_playlist(playlist_id, market)

        items: list[PlaylistTrack] = []
        offset = 0
        while True:
            page = client.get_playlist_tracks(playlist_id, market, limit=PLAYLIST_PAGE_SIZE, offset=offset)
            items.extend(page.items)
            if len(page.items) < PLAYLIST_PAGE_SIZE:
                break
            offset += PLAYLIST_PAGE_SIZE

        self.observer.on_debug("[Spotify]", f"Playlist {playlist_id}: {len(items)} items in {offset // PLAYLIST_PAGE_SIZE + 1} page(s)")
        owner = playlist.owner
        return PlaylistResult(
            data=PlaylistSummary(
                id=playlist.id,
                name=playlist.name,
                owner=OwnerSummary(
                    id=owner.id,
                    name=owner.display_name,
                    href=owner.href,
                    uri=owner.uri,
                    url=owner.external_urls.spotify,
                ),
                images=playlist.images or [],
                url=playlist.external_urls.spotify,
                tracks=self._playlist_tracks(playlist_id, items),
            )
        )

    def _playlist_tracks(self, playlist_id: str, items: list[PlaylistTrack]) -> list[PlaylistTrackSummary]:
        tracks: list[PlaylistTrackSummary] = []
        for item in items:
            entry = item.track
            if entry is None:
                self.observer.on_debug("[Spotify]", f"Playlist {playlist_id}: skipped an item with no track")
                continue
            images = entry.album.images if entry.album is not None else entry.images
            tracks.append(
                PlaylistTrackSummary(
                    id=entry.id,
                    name=entry.name,
                    type=entry.type,
                    artists=entry.artists,
                    images=images,
                    duration_ms=entry.duration_ms,
                    url=entry.external_urls.spotify,
                    added_at=item.added_at,
                    is_local=item.is_local,
                )
            )
        return tracks

    # -- YouTube --

    def _video(self, query: str, market: str) -> VideoResult:
        response = self._youtube_client().search(query, kind="video", max_results=1)
        first = response.items[0] if response.items else None
        if first is None or not first.id.video_id:
            raise NotFoundError("youtube", query)
        video_id = first.id.video_id
        return VideoResult(
            data=VideoSummary(
                id=video_id,
                name=first.snippet.title,
                channel=first.snippet.channel_title,
                thumbnail=first.snippet.thumbnails.best(),
                url=_watch_url(video_id),
            )
        )

    def _video_playlist(self, playlist_id: str, market: str) -> VideoPlaylistResult:
        client = self._youtube_client()
        meta = client.get_playlist(playlist_id)
        if not meta.items:
            raise NotFoundError("youtube", playlist_id)
        playlist = meta.items[0]

        items: list[PlaylistItem] = []
        page_token: str | None = None
        pages = 0
        while True:
            page = client.get_playlist_items(playlist_id, page_token=page_token, max_results=VIDEO_PLAYLIST_PAGE_SIZE)
            pages += 1
            items.extend(page.items)
            page_token = page.next_page_token
            if not page_token:
                break

        self.observer.on_debug("[YouTube]", f"Playlist {playlist_id}: {len(items)} items in {pages} page(s)")
        return VideoPlaylistResult(
            data=VideoPlaylistSummary(
                id=playlist.id,
                name=playlist.snippet.title,
                author=playlist.snippet.channel_title,
                images=playlist.snippet.thumbnails.best(),
                item_count=playlist.content_details.item_count,
                url=f"https://www.youtube.com/playlist?list={playlist.id}",
                tracks=[
                    PlaylistVideoSummary(
                        id=item.snippet.resource_id.video_id,
                        name=item.snippet.title,
                        channel=item.snippet.video_owner_channel_title or item.snippet.channel_title,
                        thumbnails=item.snippet.thumbnails,
                        url=_watch_url(item.snippet.resource_id.video_id),
                        position=item.snippet.position,
                    )
                    for item in items
                    if item.snippet.resource_id.video_id
                ],
            )
        )
