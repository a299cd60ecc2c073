"""Criação do engine do banco de dados."""

from typing import Any, Dict

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine


def create_db_engine(database_url: str, **kwargs: Any) -> Engine:
    """Cria o engine (e o pool de conexões) para a URL informada.

    O engine é passado explicitamente a cada componente; não há singleton
    global de processo aqui.
    """
    options: Dict[str, Any] = {"pool_pre_ping": True}
    if database_url.startswith("sqlite"):
        # TestClient / uvicorn workers usam threads diferentes
        options["connect_args"] = {"check_same_thread": False}
    else:
        options.update(pool_size=5, max_overflow=5)
    options.update(kwargs)
    return create_engine(database_url, **options)
