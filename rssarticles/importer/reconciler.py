"""Pipeline de importação: busca um feed suportado, registra no ledger e reconcilia os itens."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import insert, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from rssarticles.errors import (
    ArticlesError,
    EmptyFeedError,
    FeedValidationError,
    StorageConflictError,
    StorageError,
)
from rssarticles.feeds.fetcher import FeedFetcher
from rssarticles.feeds.models import FeedEntry, FeedResult
from rssarticles.feeds.validator import FeedValidator
from rssarticles.storage.ledger import ImportLedger
from rssarticles.storage.schema import articles_table

logger = logging.getLogger(__name__)

# campos sobrescritos quando o external id já existe (last-write-wins)
MUTABLE_FIELDS = ("title", "description", "publicationdate", "link", "mainpicture")

# dialetos com INSERT ... ON CONFLICT DO UPDATE
_NATIVE_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _is_unique_violation(error: IntegrityError) -> bool:
    orig = error.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate:
        return sqlstate == "23505"
    if getattr(orig, "sqlite_errorname", None) == "SQLITE_CONSTRAINT_UNIQUE":
        return True
    return "UNIQUE constraint failed" in str(orig)


class ImportReconciler:
    """Upsert de artigos pela chave externa do feed.

    Toda chamada com ``save=True`` grava uma linha no ledger de importações
    antes de mexer em ``articles``; importações que falham continuam auditáveis.
    """

    def __init__(
        self,
        engine: Engine,
        fetcher: FeedFetcher,
        validator: FeedValidator,
        ledger: Optional[ImportLedger] = None,
        default_url: Optional[str] = None,
        primary_key: str = "guid",
        upsert_strategy: str = "auto",
    ):
        self.engine = engine
        self.fetcher = fetcher
        self.validator = validator
        self.ledger = ledger or ImportLedger()
        self.primary_key = primary_key or "guid"
        self.upsert_strategy = upsert_strategy
        # URL padrão só é aceita se for válida e suportada
        self.default_url = default_url if default_url and validator.is_valid_url(default_url) else None

    def import_and_save(self, url: Optional[str] = None, save: bool = True) -> FeedResult:
        url = url or self.default_url
        if not self.validator.is_valid_url(url):
            raise FeedValidationError(
                "No URL was provided or it was malformed. Use a supported feed URL starting with http/https."
            )

        logger.info("Importing feed %s (save=%s)", url, save)
        result = self.fetcher.fetch(url)

        # dry-run: só devolve o que foi parseado
        if not save:
            return result

        try:
            with self.engine.connect() as conn:
                with conn.begin():
                    self.ledger.record(conn, result.model_dump(mode="json"))

                # lista vazia também conta como "sem itens" (diferente do serviço antigo,
                # onde um canal vazio passava e respondia 201)
                if not result.items:
                    raise EmptyFeedError("No items found in the RSS feed, so no articles were imported")

                stats = self._save_entries(conn, result)
        except ArticlesError:
            raise
        except SQLAlchemyError as e:
            logger.error("Storage failure while importing %s: %s", url, e)
            raise StorageError(f"Could not save feed {url}: {e}") from e

        logger.info(
            "Feed %s imported: %d saved (%d inserted, %d updated, %d upserted), %d skipped",
            url, stats["saved"], stats["inserted"], stats["updated"], stats["upserted"], stats["skipped"],
        )
        return result

    def _resolve_strategy(self, dialect_name: str) -> str:
        if self.upsert_strategy == "auto":
            return "native" if dialect_name in _NATIVE_INSERTS else "optimistic"
        if self.upsert_strategy == "native" and dialect_name not in _NATIVE_INSERTS:
            raise StorageError(f"Native upsert is not supported on {dialect_name}")
        return self.upsert_strategy

    def _save_entries(self, conn: Connection, result: FeedResult) -> Dict[str, int]:
        strategy = self._resolve_strategy(conn.dialect.name)
        imported_at = datetime.now(timezone.utc)
        # upsert nativo não distingue insert de update -> conta em "upserted"
        stats = {"saved": 0, "inserted": 0, "updated": 0, "upserted": 0, "skipped": 0}

        # mesma conexão para todos os itens; cada item faz commit próprio
        for entry in result.items or []:
            values = self._article_values(entry, result, imported_at)
            if values is None:
                logger.warning("Skipping entry without '%s': %s", self.primary_key, entry.title)
                stats["skipped"] += 1
                continue

            try:
                if strategy == "native":
                    self._native_upsert(conn, values)
                    outcome = "upserted"
                else:
                    outcome = "inserted" if self._optimistic_upsert(conn, values) else "updated"
            except SQLAlchemyError as e:
                logger.error("Could not save article %s: %s", values["externalid"], e)
                raise StorageError(f"Could not save article {values['externalid']}: {e}") from e
            stats[outcome] += 1
            stats["saved"] += 1

        return stats

    def _article_values(self, entry: FeedEntry, result: FeedResult, imported_at: datetime) -> Optional[Dict[str, Any]]:
        external_id = entry.key(self.primary_key)
        if external_id is None:
            return None

        # imagem do item -> imagem do feed -> vazio
        picture = (entry.image.url if entry.image else None) or (result.image.url if result.image else None) or ""

        return {
            "externalid": external_id,
            "importdate": imported_at,
            "title": entry.title or "",
            "description": entry.content_snippet or "",
            "publicationdate": entry.pub_date or imported_at,
            "link": entry.link or "",
            "mainpicture": picture,
        }

    def _native_upsert(self, conn: Connection, values: Dict[str, Any]) -> None:
        stmt = _NATIVE_INSERTS[conn.dialect.name](articles_table).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[articles_table.c.externalid],
            set_={field: stmt.excluded[field] for field in MUTABLE_FIELDS},
        )
        with conn.begin():
            conn.execute(stmt)

    def _optimistic_upsert(self, conn: Connection, values: Dict[str, Any]) -> bool:
        """Tenta INSERT; se o external id já existe, faz UPDATE. Retorna True se inseriu."""
        try:
            self._insert(conn, values)
            return True
        except StorageConflictError:
            pass

        with conn.begin():
            conn.execute(
                update(articles_table)
                .where(articles_table.c.externalid == values["externalid"])
                .values({field: values[field] for field in MUTABLE_FIELDS})
            )
        return False

    def _insert(self, conn: Connection, values: Dict[str, Any]) -> None:
        try:
            with conn.begin():
                conn.execute(insert(articles_table).values(**values))
        except IntegrityError as e:
            if _is_unique_violation(e):
                raise StorageConflictError(f"Article {values['externalid']} already exists") from e
            raise
