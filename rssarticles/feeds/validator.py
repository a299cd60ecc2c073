from typing import Any, Iterable, Optional
from urllib.parse import urlsplit

from rssarticles.config import DEFAULT_SUPPORTED_FEEDS


class FeedValidator:
    """Decide se uma URL é bem formada E faz parte da allow-list de feeds."""

    ALLOWED_PREFIXES = ("http://", "https://")

    def __init__(self, supported_feeds: Optional[Iterable[str]] = None):
        self.supported_feeds = list(supported_feeds) if supported_feeds is not None else list(DEFAULT_SUPPORTED_FEEDS)

    def is_valid_url(self, url: Any) -> bool:
        if not url or not isinstance(url, str):
            return False

        # "http:hello" ou "//host/x" passariam no parser, mas não servem aqui
        if not url.startswith(self.ALLOWED_PREFIXES):
            return False

        if not self._parses(url):
            return False

        return self.is_supported_feed(url)

    def is_supported_feed(self, feed_url: str) -> bool:
        return feed_url in self.supported_feeds

    @staticmethod
    def _parses(url: str) -> bool:
        if any(ch.isspace() for ch in url):
            return False
        try:
            parts = urlsplit(url)
            # .port levanta ValueError para porta inválida
            parts.port
        except ValueError:
            return False
        return parts.scheme in ("http", "https") and bool(parts.hostname)
