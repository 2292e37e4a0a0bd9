#!/usr/bin/env python3
from __future__ import annotations

import argparse

from mediasearch.core.models import AUDIO_FORMATS


def main() -> None:
    parser = argparse.ArgumentParser(description="Download audio for a query or URL with yt-dlp")
    parser.add_argument("query", help="Song query or video URL")
    parser.add_argument("--format", default="best", choices=AUDIO_FORMATS, help="Audio format for yt-dlp extraction")
    parser.add_argument("--settings", default=None, help="Path to settings YAML")
    args = parser.parse_args()

    from mediasearch.tools._common import get_client, print_json

    client = get_client(args.settings)
    path = client.download_audio(args.query, args.format)
    print_json({"path": path})


if __name__ == "__main__":
    main()
