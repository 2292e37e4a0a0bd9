from __future__ import annotations

from loguru import logger


class SearchObserver:
    """Hooks for callers that want to see classification decisions and failures.

    Subclass and override either method; the base class ignores everything.
    """

    def on_debug(self, tag: str, message: str) -> None:
        return None

    def on_error(self, error: BaseException) -> None:
        return None


class LoggingObserver(SearchObserver):
    def on_debug(self, tag: str, message: str) -> None:
        logger.debug(f"{tag} {message}")

    def on_error(self, error: BaseException) -> None:
        logger.warning(f"Search failed: {error}")
