from __future__ import annotations

import json
from typing import Any

from mediasearch.core import MediaSearch
from mediasearch.core.settings import load_settings, setup_logging


def get_client(settings_path: str | None = None) -> MediaSearch:
    settings = load_settings(settings_path)
    setup_logging(settings)
    return MediaSearch.from_settings(settings)


def print_json(data: Any) -> None:
    if hasattr(data, "model_dump"):
        print(json.dumps(data.model_dump(mode="json"), indent=2))
        return
    print(json.dumps(data, indent=2))
