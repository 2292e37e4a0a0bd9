from __future__ import annotations


class MediaSearchError(Exception):
    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class MissingCredentialsError(MediaSearchError):
    def __init__(self, message: str = "Configure Spotify client id/secret or a YouTube API key.") -> None:
        super().__init__("MISSING_CREDENTIALS", message)


class AuthError(MediaSearchError):
    def __init__(self, message: str) -> None:
        super().__init__("SPOTIFY_AUTH_FAILED", message)


class UpstreamError(MediaSearchError):
    """Non-2xx answer (or no answer at all) from a data endpoint.

    ``status`` is None when the request never produced a response.
    """

    def __init__(self, service: str, status: int | None, message: str | None = None, code: str = "UPSTREAM_ERROR") -> None:
        detail = message or f"{service} request failed with status {status}"
        super().__init__(code, detail)
        self.service = service
        self.status = status


class VideoServiceError(UpstreamError):
    def __init__(self, status: int | None, message: str) -> None:
        super().__init__("youtube", status, message, code="YOUTUBE_ERROR")


class RateLimitedError(UpstreamError):
    def __init__(self, service: str, retry_after_seconds: int | None = None) -> None:
        if retry_after_seconds is not None:
            message = f"{service} rate limit exceeded. Try again in {retry_after_seconds} seconds."
        else:
            message = f"{service} rate limit exceeded. Try again later."
        status = 403 if service == "youtube" else 429
        super().__init__(service, status, message, code="RATE_LIMITED")
        self.retry_after_seconds = retry_after_seconds


class NotFoundError(UpstreamError):
    def __init__(self, service: str, resource: str) -> None:
        super().__init__(service, None, f"{service} returned no result for {resource!r}", code="NOT_FOUND")
        self.resource = resource


class SchemaError(MediaSearchError):
    def __init__(self, service: str, details: str) -> None:
        super().__init__("SCHEMA_MISMATCH", f"Unexpected {service} response shape: {details}")
        self.service = service
        self.details = details


class DownloaderUnavailableError(MediaSearchError):
    def __init__(self, binary: str) -> None:
        super().__init__("DOWNLOADER_UNAVAILABLE", f"{binary} not found in PATH; install it from https://github.com/yt-dlp/yt-dlp")
        self.binary = binary


class DownloadFailedError(MediaSearchError):
    def __init__(self, exit_code: int | None, stderr: str = "") -> None:
        if exit_code is None:
            message = "Downloader did not finish"
        else:
            message = f"Downloader exited with code {exit_code}"
        if stderr:
            message = f"{message}: {stderr}"
        super().__init__("DOWNLOAD_FAILED", message)
        self.exit_code = exit_code
        self.stderr = stderr


class DownloadPathMissingError(MediaSearchError):
    def __init__(self) -> None:
        super().__init__("DOWNLOAD_PATH_MISSING", "Downloader finished but reported no output file path")


class InternalError(MediaSearchError):
    def __init__(self, message: str) -> None:
        super().__init__("INTERNAL_ERROR", message)


def parse_retry_after(headers) -> int | None:
    raw = headers.get("Retry-After") or headers.get("retry-after")
    try:
        return int(raw) if raw is not None else None
    except (TypeError, ValueError):
        return None
