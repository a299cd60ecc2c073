# rssarticles/tests/conftest.py
from typing import Dict, List, Optional

import pytest

from rssarticles.errors import FeedFetchError
from rssarticles.feeds import FeedFetcher, FeedValidator
from rssarticles.storage.connection import create_db_engine
from rssarticles.storage.schema import migrate

GUARDIAN_URL = "https://www.theguardian.com/world/europe-news/rss"
LEMONDE_URL = "https://www.lemonde.fr/rss/une.xml"


def make_item(guid, title, description="<p>Some <b>news</b> text</p>",
              pub_date="Mon, 06 Oct 2025 08:02:02 GMT", link=None, image=None):
    return {
        "guid": guid,
        "title": title,
        "description": description,
        "pub_date": pub_date,
        "link": link or f"https://example.org/{guid}",
        "image": image,
    }


def make_rss(items: Optional[List[Dict]] = None, feed_image: Optional[str] = None) -> str:
    """Monta um RSS 2.0 mínimo (com media:content) para os testes."""
    parts = []
    for it in items or []:
        media = f'<media:content url="{it["image"]}" medium="image" />' if it.get("image") else ""
        parts.append(
            "<item>"
            f"<title>{it['title']}</title>"
            f"<link>{it['link']}</link>"
            f"<description><![CDATA[{it['description']}]]></description>"
            f'<guid isPermaLink="false">{it["guid"]}</guid>'
            f"<pubDate>{it['pub_date']}</pubDate>"
            f"{media}"
            "</item>"
        )
    image = f"<image><url>{feed_image}</url><title>Test feed</title><link>https://example.org</link></image>" if feed_image else ""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0" xmlns:media="http://search.yahoo.com/mrss/">'
        "<channel>"
        "<title>Test feed</title>"
        "<link>https://example.org</link>"
        "<description>Feed de testes</description>"
        f"{image}"
        f"{''.join(parts)}"
        "</channel></rss>"
    )


DEFAULT_ITEMS = [
    make_item("guid-1", "The Quick Brown Fox", image="https://img.example.org/1.jpg"),
    make_item("guid-2", "Europe braces for another heatwave"),
]


class FakeFetcher:
    """Substitui a rede: devolve documentos em memória, parseados pelo FeedFetcher real."""

    def __init__(self, documents: Optional[Dict[str, str]] = None):
        self.documents = documents or {}
        self.calls: List[str] = []

    def fetch(self, url: str):
        self.calls.append(url)
        if url not in self.documents:
            raise FeedFetchError(f"Could not retrieve feed {url}: offline")
        return FeedFetcher.parse(self.documents[url], url)


@pytest.fixture()
def engine(tmp_path):
    # Banco sqlite temporário, schema criado do zero
    eng = create_db_engine(f"sqlite:///{tmp_path / 'articles.db'}")
    migrate(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def fake_fetcher():
    return FakeFetcher({
        GUARDIAN_URL: make_rss(DEFAULT_ITEMS, feed_image="https://img.example.org/feed.png"),
    })


@pytest.fixture()
def validator():
    return FeedValidator()


@pytest.fixture()
def app(monkeypatch, engine, fake_fetcher):
    # Patches para impedir network e usar o banco temporário
    from rssarticles.api import main as api_main

    monkeypatch.setattr(api_main, "engine", engine, raising=True)
    monkeypatch.setattr(api_main, "fetcher", fake_fetcher, raising=True)
    return api_main.app


@pytest.fixture()
def client(app):
    from fastapi.testclient import TestClient
    # Usa contexto para garantir lifespan (migrate) com patches aplicados
    with TestClient(app) as c:
        yield c
