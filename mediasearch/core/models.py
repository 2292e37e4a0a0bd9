from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from .schemas import Image, SearchResponse, SimplifiedArtist, Thumbnail, Thumbnails

AudioFormat = Literal["best", "aac", "alac", "flac", "m4a", "mp3", "opus", "vorbis", "wav"]
AUDIO_FORMATS: tuple[str, ...] = ("best", "aac", "alac", "flac", "m4a", "mp3", "opus", "vorbis", "wav")


class Credentials(BaseModel):
    model_config = ConfigDict(frozen=True)

    client_id: str
    client_secret: str


class AccessToken(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: str
    expires_at: float

    def is_valid(self, now: float) -> bool:
        return now < self.expires_at


class LoadType(str, Enum):
    SEARCH = "search"
    TRACK = "track"
    ARTIST = "artist"
    ALBUM = "album"
    PLAYLIST = "playlist"
    VIDEO = "video"
    VIDEO_PLAYLIST = "video_playlist"


class TrackSummary(BaseModel):
    type: str = "track"
    id: str | None = None
    name: str
    artists: list[SimplifiedArtist] = Field(default_factory=list)
    images: list[Image] = Field(default_factory=list)
    duration_ms: int = 0
    url: str = ""


class ArtistTrackSummary(BaseModel):
    id: str | None = None
    name: str
    artists: str = ""
    images: list[Image] = Field(default_factory=list)
    duration_ms: int = 0
    url: str = ""


class ArtistSummary(BaseModel):
    id: str | None = None
    name: str
    images: list[Image] = Field(default_factory=list)
    url: str = ""
    tracks: list[ArtistTrackSummary] = Field(default_factory=list)


class AlbumTrackSummary(BaseModel):
    id: str | None = None
    name: str
    artists: list[SimplifiedArtist] = Field(default_factory=list)
    duration_ms: int = 0
    url: str = ""


class AlbumSummary(BaseModel):
    id: str | None = None
    name: str
    images: list[Image] = Field(default_factory=list)
    url: str = ""
    tracks: list[AlbumTrackSummary] = Field(default_factory=list)


class OwnerSummary(BaseModel):
    id: str
    name: str | None = None
    href: str | None = None
    uri: str | None = None
    url: str = ""


class PlaylistTrackSummary(BaseModel):
    id: str | None = None
    name: str
    type: str = "track"
    artists: list[SimplifiedArtist] = Field(default_factory=list)
    images: list[Image] = Field(default_factory=list)
    duration_ms: int = 0
    url: str = ""
    added_at: str | None = None
    is_local: bool = False


class PlaylistSummary(BaseModel):
    id: str
    name: str
    owner: OwnerSummary
    images: list[Image] = Field(default_factory=list)
    url: str = ""
    tracks: list[PlaylistTrackSummary] = Field(default_factory=list)


class VideoSummary(BaseModel):
    id: str
    name: str
    channel: str = ""
    thumbnail: Thumbnail | None = None
    url: str


class PlaylistVideoSummary(BaseModel):
    id: str
    name: str
    channel: str = ""
    thumbnails: Thumbnails = Field(default_factory=Thumbnails)
    url: str
    position: int | None = None


class VideoPlaylistSummary(BaseModel):
    id: str
    name: str
    author: str = ""
    images: Thumbnail | None = None
    item_count: int = 0
    url: str
    tracks: list[PlaylistVideoSummary] = Field(default_factory=list)


class SearchResult(BaseModel):
    load_type: Literal[LoadType.SEARCH] = LoadType.SEARCH
    data: SearchResponse


class TrackResult(BaseModel):
    load_type: Literal[LoadType.TRACK] = LoadType.TRACK
    data: TrackSummary


class ArtistResult(BaseModel):
    load_type: Literal[LoadType.ARTIST] = LoadType.ARTIST
    data: ArtistSummary


class AlbumResult(BaseModel):
    load_type: Literal[LoadType.ALBUM] = LoadType.ALBUM
    data: AlbumSummary


class PlaylistResult(BaseModel):
    load_type: Literal[LoadType.PLAYLIST] = LoadType.PLAYLIST
    data: PlaylistSummary


class VideoResult(BaseModel):
    load_type: Literal[LoadType.VIDEO] = LoadType.VIDEO
    data: VideoSummary


class VideoPlaylistResult(BaseModel):
    load_type: Literal[LoadType.VIDEO_PLAYLIST] = LoadType.VIDEO_PLAYLIST
    data: VideoPlaylistSummary


ResolvedQuery = Annotated[
    Union[SearchResult, TrackResult, ArtistResult, AlbumResult, PlaylistResult, VideoResult, VideoPlaylistResult],
    Field(discriminator="load_type"),
]
