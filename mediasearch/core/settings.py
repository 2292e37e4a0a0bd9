from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any

import yaml
from loguru import logger


def load_settings(path: str | None = None) -> dict[str, Any]:
    config_path = Path(path or os.getenv("MEDIASEARCH_SETTINGS_PATH", "config/settings.example.yaml"))
    if not config_path.exists():
        return {}
    return yaml.safe_load(config_path.read_text()) or {}


def spotify_credentials(settings: dict[str, Any]) -> tuple[str | None, str | None]:
    cfg = settings.get("spotify") or {}
    if not cfg.get("enabled", True):
        return None, None
    client_id_env = cfg.get("client_id_env", "SPOTIFY_CLIENT_ID")
    client_secret_env = cfg.get("client_secret_env", "SPOTIFY_CLIENT_SECRET")
    return os.getenv(str(client_id_env)), os.getenv(str(client_secret_env))


def youtube_api_key(settings: dict[str, Any]) -> str | None:
    cfg = settings.get("youtube") or {}
    if not cfg.get("enabled", True):
        return None
    return os.getenv(str(cfg.get("api_key_env", "YOUTUBE_API_KEY")))


def request_timeout(settings: dict[str, Any], service: str) -> int:
    return int((settings.get(service) or {}).get("request_timeout_sec", 10))


def download_config(settings: dict[str, Any]) -> tuple[str, str, int | None]:
    download = settings.get("download") or {}
    timeout = download.get("timeout_sec")
    return (
        download.get("dir", "./downloads"),
        download.get("binary", "yt-dlp"),
        int(timeout) if timeout is not None else None,
    )


def setup_logging(settings: dict[str, Any]) -> None:
    """Route mediasearch logs to stderr at the configured level."""
    level = str((settings.get("logging") or {}).get("level", "INFO")).upper()
    logger.remove()
    logger.add(
        sys.stderr,
        format="{time:YYYY-MM-DDTHH:mm:ssZ} | {level:<8} | {name} | {message}",
        level=level,
    )
    logger.enable("mediasearch")
