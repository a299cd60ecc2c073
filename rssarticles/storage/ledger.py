import json
import logging
from typing import Any, Dict, List

from sqlalchemy import insert, select
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from rssarticles.errors import StorageError
from rssarticles.storage.models import ImportRecord
from rssarticles.storage.schema import imports_table

logger = logging.getLogger(__name__)


class ImportLedger:
    """Histórico append-only dos payloads importados (auditoria)."""

    def record(self, conn: Connection, payload: Dict[str, Any]) -> int:
        # importdate fica a cargo do default do banco
        try:
            result = conn.execute(
                insert(imports_table).values(rawcontent=json.dumps(payload, ensure_ascii=False, default=str))
            )
        except SQLAlchemyError as e:
            logger.error("Could not record import: %s", e)
            raise StorageError(f"Could not record import: {e}") from e
        record_id = result.inserted_primary_key[0]
        logger.debug("Import recorded with id=%s", record_id)
        return record_id

    def history(self, conn: Connection) -> List[ImportRecord]:
        try:
            rows = conn.execute(select(imports_table).order_by(imports_table.c.id)).mappings().all()
        except SQLAlchemyError as e:
            raise StorageError(f"Could not read import history: {e}") from e
        return [ImportRecord(**row) for row in rows]
