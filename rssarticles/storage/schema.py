import logging

from sqlalchemy import Column, DateTime, Integer, MetaData, String, Table, Text, func
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

metadata = MetaData()

# Histórico de todas as importações solicitadas (payload bruto em JSON)
imports_table = Table(
    "imports",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("importdate", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("rawcontent", Text, nullable=False),
)

articles_table = Table(
    "articles",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    # índice único: é o banco que garante que não existam artigos duplicados
    Column("externalid", String(500), nullable=False, unique=True),
    Column("importdate", DateTime(timezone=True), nullable=False),
    Column("title", Text, nullable=False),
    Column("description", Text, nullable=False),
    Column("publicationdate", DateTime(timezone=True), nullable=False),
    Column("link", Text, nullable=False),
    # nem todo artigo traz imagem
    Column("mainpicture", Text, nullable=True),
)


def migrate(engine: Engine) -> None:
    """Cria as tabelas se ainda não existirem (idempotente)."""
    metadata.create_all(engine)
    logger.info("Schema ready on %s", engine.url.render_as_string(hide_password=True))


if __name__ == "__main__":
    from rssarticles.config import Settings
    from rssarticles.storage.connection import create_db_engine

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    settings = Settings.from_env()
    migrate(create_db_engine(settings.database_url))
