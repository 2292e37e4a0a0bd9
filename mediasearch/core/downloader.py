from __future__ import annotations

import re
import shutil
import subprocess
from pathlib import Path

from loguru import logger

from .errors import DownloadFailedError, DownloaderUnavailableError, DownloadPathMissingError
from .models import AUDIO_FORMATS
from .resolver import YOUTUBE_LINK_RE

URL_RE = re.compile(r"^https?://", re.IGNORECASE)
OUTPUT_TEMPLATE = "%(title)s [%(id)s].%(ext)s"


class AudioDownloader:
    """Hands a query to yt-dlp and returns the path of the extracted audio."""

    def __init__(self, download_dir: str = "./downloads", binary: str = "yt-dlp", timeout_sec: int | None = None) -> None:
        self.download_dir = Path(download_dir)
        self.binary = binary
        self.timeout_sec = timeout_sec
        self._binary_path: str | None = None

    def _ensure_binary(self) -> str:
        if self._binary_path is None:
            found = shutil.which(self.binary)
            if not found:
                raise DownloaderUnavailableError(self.binary)
            self._binary_path = found
        return self._binary_path

    @staticmethod
    def search_target(query: str) -> str:
        query = query.strip()
        if URL_RE.match(query):
            return query
        if YOUTUBE_LINK_RE.match(query):
            return f"https://{query}"
        return f"ytsearch1:{query} official video"

    def build_command(self, binary: str, query: str, audio_format: str) -> list[str]:
        out_tpl = str(self.download_dir.resolve() / OUTPUT_TEMPLATE)
        return [
            binary,
            "-x",
            "--audio-format",
            audio_format,
            "--audio-quality",
            "0",
            "--embed-metadata",
            "--no-playlist",
            "--no-progress",
            "-o",
            out_tpl,
            "--print",
            "after_move:filepath",
            self.search_target(query),
        ]

    def download_audio(self, query: str, audio_format: str = "best") -> str:
        if audio_format not in AUDIO_FORMATS:
            raise ValueError(f"Unsupported audio format {audio_format!r}; expected one of {', '.join(AUDIO_FORMATS)}")

        binary = self._ensure_binary()
        self.download_dir.mkdir(parents=True, exist_ok=True)
        cmd = self.build_command(binary, query, audio_format)
        logger.debug(f"Running {' '.join(cmd)}")

        try:
            proc = subprocess.run(cmd, capture_output=True, text=True, timeout=self.timeout_sec)
        except FileNotFoundError as exc:
            self._binary_path = None
            raise DownloaderUnavailableError(self.binary) from exc
        except subprocess.TimeoutExpired as exc:
            raise DownloadFailedError(None, f"timed out after {self.timeout_sec}s") from exc

        if proc.returncode != 0:
            raise DownloadFailedError(proc.returncode, (proc.stderr or "").strip())

        lines = [line.strip() for line in (proc.stdout or "").splitlines() if line.strip()]
        if not lines:
            raise DownloadPathMissingError()

        path = str(Path(lines[-1]).resolve())
        logger.info(f"Downloaded {query!r} to {path}")
        return path
