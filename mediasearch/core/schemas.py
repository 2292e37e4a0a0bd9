"""Wire shapes of the Spotify Web API and the YouTube Data API v3.

Only the fields the resolver reads are declared; anything else the services
send is ignored. Payloads go through ``parse`` so a shape mismatch surfaces
as a ``SchemaError`` instead of a ``KeyError`` deep in normalization.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .errors import SchemaError

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


class WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


def parse(model: type[M], payload: Any, service: str) -> M:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise SchemaError(service, f"{model.__name__}: {exc.error_count()} validation error(s); {exc.errors()[0]['loc']}") from exc


# -- Spotify --


class Image(WireModel):
    url: str
    height: int | None = None
    width: int | None = None


class ExternalUrls(WireModel):
    spotify: str = ""


class SimplifiedArtist(WireModel):
    id: str | None = None
    name: str
    href: str | None = None
    uri: str | None = None
    type: str = "artist"
    external_urls: ExternalUrls = Field(default_factory=ExternalUrls)


class Artist(SimplifiedArtist):
    images: list[Image] = Field(default_factory=list)
    genres: list[str] = Field(default_factory=list)
    popularity: int | None = None


class SimplifiedAlbum(WireModel):
    id: str | None = None
    name: str = ""
    album_type: str | None = None
    images: list[Image] = Field(default_factory=list)
    artists: list[SimplifiedArtist] = Field(default_factory=list)
    release_date: str | None = None
    external_urls: ExternalUrls = Field(default_factory=ExternalUrls)


class Track(WireModel):
    id: str | None = None
    name: str
    type: str = "track"
    artists: list[SimplifiedArtist] = Field(default_factory=list)
    album: SimplifiedAlbum = Field(default_factory=SimplifiedAlbum)
    duration_ms: int = 0
    explicit: bool = False
    is_local: bool = False
    external_urls: ExternalUrls = Field(default_factory=ExternalUrls)


class SimplifiedTrack(WireModel):
    id: str | None = None
    name: str
    artists: list[SimplifiedArtist] = Field(default_factory=list)
    duration_ms: int = 0
    track_number: int | None = None
    external_urls: ExternalUrls = Field(default_factory=ExternalUrls)


class Paging(WireModel, Generic[T]):
    items: list[T] = Field(default_factory=list)
    offset: int = 0
    limit: int = 0
    total: int = 0
    next: str | None = None


class Album(SimplifiedAlbum):
    tracks: Paging[SimplifiedTrack] = Field(default_factory=Paging[SimplifiedTrack])
    label: str | None = None


class TopTracks(WireModel):
    tracks: list[Track] = Field(default_factory=list)


class PlaylistOwner(WireModel):
    id: str
    display_name: str | None = None
    href: str | None = None
    uri: str | None = None
    external_urls: ExternalUrls = Field(default_factory=ExternalUrls)


class PlaylistEntry(WireModel):
    """The ``track`` object of a playlist item; may also be an episode."""

    id: str | None = None
    name: str = ""
    type: str = "track"
    artists: list[SimplifiedArtist] = Field(default_factory=list)
    album: SimplifiedAlbum | None = None
    images: list[Image] = Field(default_factory=list)
    duration_ms: int = 0
    external_urls: ExternalUrls = Field(default_factory=ExternalUrls)


class PlaylistTrack(WireModel):
    added_at: str | None = None
    is_local: bool = False
    track: PlaylistEntry | None = None


class SimplifiedPlaylist(WireModel):
    id: str
    name: str
    description: str | None = None
    images: list[Image] | None = None
    owner: PlaylistOwner | None = None
    external_urls: ExternalUrls = Field(default_factory=ExternalUrls)


class Playlist(WireModel):
    id: str
    name: str
    description: str | None = None
    images: list[Image] | None = None
    owner: PlaylistOwner
    external_urls: ExternalUrls = Field(default_factory=ExternalUrls)


class SearchResponse(WireModel):
    """Combined search answer; shows, episodes and audiobooks are not modelled."""

    tracks: Paging[Track] | None = None
    artists: Paging[Artist] | None = None
    albums: Paging[SimplifiedAlbum] | None = None
    playlists: Paging[SimplifiedPlaylist] | None = None

    @model_validator(mode="before")
    @classmethod
    def _drop_null_items(cls, value: Any) -> Any:
        # Search pages can carry nulls in place of unavailable playlists.
        if not isinstance(value, dict):
            return value
        cleaned = dict(value)
        for section in ("tracks", "artists", "albums", "playlists"):
            page = cleaned.get(section)
            if isinstance(page, dict) and isinstance(page.get("items"), list):
                cleaned[section] = {**page, "items": [item for item in page["items"] if item is not None]}
        return cleaned


class TokenResponse(WireModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int = 3600


class Markets(WireModel):
    markets: list[str] = Field(default_factory=list)


# -- YouTube --


class Thumbnail(WireModel):
    url: str
    width: int | None = None
    height: int | None = None


class Thumbnails(WireModel):
    default: Thumbnail | None = None
    medium: Thumbnail | None = None
    high: Thumbnail | None = None
    standard: Thumbnail | None = None
    maxres: Thumbnail | None = None

    def best(self) -> Thumbnail | None:
        return self.high or self.medium or self.default or self.standard or self.maxres


class SearchItemId(WireModel):
    kind: str | None = None
    video_id: str | None = Field(default=None, alias="videoId")
    playlist_id: str | None = Field(default=None, alias="playlistId")


class SearchSnippet(WireModel):
    title: str = ""
    channel_id: str | None = Field(default=None, alias="channelId")
    channel_title: str = Field(default="", alias="channelTitle")
    description: str = ""
    thumbnails: Thumbnails = Field(default_factory=Thumbnails)


class SearchItem(WireModel):
    id: SearchItemId
    snippet: SearchSnippet = Field(default_factory=SearchSnippet)


class VideoSearchResponse(WireModel):
    items: list[SearchItem] = Field(default_factory=list)
    next_page_token: str | None = Field(default=None, alias="nextPageToken")


class ResourceId(WireModel):
    kind: str | None = None
    video_id: str | None = Field(default=None, alias="videoId")


class PlaylistItemSnippet(WireModel):
    title: str = ""
    channel_title: str = Field(default="", alias="channelTitle")
    video_owner_channel_title: str | None = Field(default=None, alias="videoOwnerChannelTitle")
    position: int | None = None
    thumbnails: Thumbnails = Field(default_factory=Thumbnails)
    resource_id: ResourceId = Field(default_factory=ResourceId, alias="resourceId")


class PlaylistItem(WireModel):
    id: str | None = None
    snippet: PlaylistItemSnippet = Field(default_factory=PlaylistItemSnippet)


class PlaylistItemsResponse(WireModel):
    items: list[PlaylistItem] = Field(default_factory=list)
    next_page_token: str | None = Field(default=None, alias="nextPageToken")


class PlaylistSnippet(WireModel):
    title: str = ""
    channel_title: str = Field(default="", alias="channelTitle")
    thumbnails: Thumbnails = Field(default_factory=Thumbnails)


class PlaylistContentDetails(WireModel):
    item_count: int = Field(default=0, alias="itemCount")


class PlaylistResource(WireModel):
    id: str
    snippet: PlaylistSnippet = Field(default_factory=PlaylistSnippet)
    content_details: PlaylistContentDetails = Field(default_factory=PlaylistContentDetails, alias="contentDetails")


class PlaylistsResponse(WireModel):
    items: list[PlaylistResource] = Field(default_factory=list)


class ApiErrorDetail(WireModel):
    reason: str | None = None
    message: str | None = None


class ApiErrorBody(WireModel):
    code: int | None = None
    message: str | None = None
    errors: list[ApiErrorDetail] = Field(default_factory=list)


class ApiErrorResponse(WireModel):
    error: ApiErrorBody = Field(default_factory=ApiErrorBody)
