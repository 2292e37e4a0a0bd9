#!/usr/bin/env python3
from __future__ import annotations

import argparse


def main() -> None:
    parser = argparse.ArgumentParser(description="Resolve a Spotify/YouTube link or free-text query")
    parser.add_argument("query", help="Search text or a Spotify/YouTube link")
    parser.add_argument("--market", default="US", help="Spotify market (ISO 3166-1 alpha-2)")
    parser.add_argument("--settings", default=None, help="Path to settings YAML")
    args = parser.parse_args()

    from mediasearch.tools._common import get_client, print_json

    client = get_client(args.settings)
    result = client.search(args.query, market=args.market)
    print_json(result)


if __name__ == "__main__":
    main()
