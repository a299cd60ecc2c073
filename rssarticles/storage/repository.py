import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from rssarticles.errors import StorageError
from rssarticles.storage.models import Article
from rssarticles.storage.schema import articles_table
from rssarticles.utils.text import word_with_most_vowels

logger = logging.getLogger(__name__)


class ArticleReader:
    """Leitura dos artigos persistidos + campo derivado wordwithmostvowels."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def list_articles(self) -> List[Article]:
        # sem paginação/filtro: lê a tabela inteira
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(select(articles_table).order_by(articles_table.c.id)).mappings().all()
        except SQLAlchemyError as e:
            logger.error("Could not load articles: %s", e)
            raise StorageError(f"Could not load articles: {e}") from e

        return [
            Article(**row, wordwithmostvowels=word_with_most_vowels(row["title"]))
            for row in rows
        ]
