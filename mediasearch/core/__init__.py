from loguru import logger

from .client import MediaSearch
from .downloader import AudioDownloader
from .errors import (
    AuthError,
    DownloadFailedError,
    DownloaderUnavailableError,
    DownloadPathMissingError,
    InternalError,
    MediaSearchError,
    MissingCredentialsError,
    NotFoundError,
    RateLimitedError,
    SchemaError,
    UpstreamError,
    VideoServiceError,
)
from .events import LoggingObserver, SearchObserver
from .models import AUDIO_FORMATS, LoadType, ResolvedQuery
from .resolver import QueryResolver, classify

logger.disable("mediasearch")

__all__ = [
    "AUDIO_FORMATS",
    "AudioDownloader",
    "AuthError",
    "DownloadFailedError",
    "DownloadPathMissingError",
    "DownloaderUnavailableError",
    "InternalError",
    "LoadType",
    "LoggingObserver",
    "MediaSearch",
    "MediaSearchError",
    "MissingCredentialsError",
    "NotFoundError",
    "QueryResolver",
    "RateLimitedError",
    "ResolvedQuery",
    "SchemaError",
    "SearchObserver",
    "UpstreamError",
    "VideoServiceError",
    "classify",
]
