import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import feedparser
import requests
from requests.adapters import HTTPAdapter

from rssarticles.errors import FeedFetchError
from rssarticles.feeds.models import FeedEntry, FeedImage, FeedResult
from rssarticles.utils.text import strip_html

logger = logging.getLogger(__name__)

# campos já normalizados explicitamente; o resto (strings) vai como extra
_MAPPED_KEYS = {"guid", "title", "link", "pub_date", "content", "content_snippet", "image"}


def _build_session() -> requests.Session:
    session = requests.Session()
    # pool de conexões, sem retry automático (o cliente decide reimportar)
    adapter = HTTPAdapter(pool_connections=10, pool_maxsize=20, max_retries=0)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.headers.update({"User-Agent": "rssarticles/1.0 (+https://localhost)"})
    return session


class FeedFetcher:
    """Busca um feed remoto e normaliza em FeedResult. Não valida a allow-list."""

    TIMEOUT = 10

    def __init__(self, timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        self.timeout = timeout or self.TIMEOUT
        self.session = session or _build_session()

    def fetch(self, url: str) -> FeedResult:
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error("Fetch failed for %s: %s", url, e)
            raise FeedFetchError(f"Could not retrieve feed {url}: {e}") from e

        return self.parse(response.content, url)

    @classmethod
    def parse(cls, document: Any, url: Optional[str] = None) -> FeedResult:
        feed = feedparser.parse(document)
        # version vazio = feedparser não reconheceu RSS/Atom
        if not feed.get("version"):
            reason = feed.get("bozo_exception") or "unrecognised document"
            raise FeedFetchError(f"Could not parse feed {url or ''}: {reason}".strip())

        meta = feed.feed
        feed_image = (meta.get("image") or {}).get("href")
        items = [cls._normalize_entry(entry) for entry in feed.entries]

        return FeedResult(
            title=meta.get("title"),
            description=meta.get("subtitle") or meta.get("description"),
            link=meta.get("link"),
            feed_url=url,
            image=FeedImage(url=feed_image) if feed_image else None,
            items=items,
        )

    @staticmethod
    def _entry_date(entry: Dict) -> Optional[datetime]:
        # published_parsed preferencial; fallback para updated_parsed
        for key in ("published_parsed", "updated_parsed"):
            parsed = entry.get(key)
            if parsed:
                try:
                    return datetime(*parsed[:6], tzinfo=timezone.utc)
                except (TypeError, ValueError):
                    continue
        return None

    @staticmethod
    def _entry_image(entry: Dict) -> Optional[str]:
        for media in entry.get("media_content") or []:
            if media.get("url") and media.get("medium", "image") == "image":
                return media["url"]
        for thumb in entry.get("media_thumbnail") or []:
            if thumb.get("url"):
                return thumb["url"]
        for enclosure in entry.get("enclosures") or []:
            if enclosure.get("href") and (enclosure.get("type") or "").startswith("image/"):
                return enclosure["href"]
        image = entry.get("image")
        if isinstance(image, dict) and image.get("href"):
            return image["href"]
        return None

    @classmethod
    def _normalize_entry(cls, entry: Dict) -> FeedEntry:
        contents = entry.get("content") or []
        content = contents[0].get("value") if contents else entry.get("summary")
        image_url = cls._entry_image(entry)

        extra = {
            key: value
            for key, value in entry.items()
            if isinstance(value, str)
            and key not in _MAPPED_KEYS
            and not key.startswith("_")
            and not hasattr(FeedEntry, key)
        }

        return FeedEntry(
            guid=entry.get("id") or entry.get("guid"),
            title=entry.get("title"),
            link=entry.get("link"),
            pub_date=cls._entry_date(entry),
            content=content,
            content_snippet=strip_html(entry.get("summary") or content),
            image=FeedImage(url=image_url) if image_url else None,
            **extra,
        )
