import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine

from rssarticles.config import Settings
from rssarticles.errors import ArticlesError
from rssarticles.feeds import FeedFetcher, FeedValidator
from rssarticles.importer.reconciler import ImportReconciler
from rssarticles.storage.connection import create_db_engine
from rssarticles.storage.repository import ArticleReader
from rssarticles.storage.schema import migrate

# Carrega variáveis do .env
settings = Settings.from_env()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

engine: Engine = create_db_engine(settings.database_url)
fetcher = FeedFetcher(timeout=settings.feed_timeout)
validator = FeedValidator(settings.supported_feeds)

ENDPOINTS = [
    {
        "endpoint": "/api/articles",
        "description": "Get the articles imported from the RSS feeds",
        "method": "GET",
    },
    {
        "endpoint": "/api/articles/import",
        "description": "Import an RSS feed",
        "method": "POST",
        "parameters": [
            {
                "name": "siteRssUrl",
                "description": "The URL of the RSS feed to import",
                "required": True,
            },
        ],
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    # garante as tabelas antes de aceitar requests
    migrate(engine)
    yield
    engine.dispose()


# Dependências: cada componente recebe o engine explicitamente
def get_engine() -> Engine:
    return engine


def get_reader(db: Engine = Depends(get_engine)) -> ArticleReader:
    return ArticleReader(db)


def get_reconciler(db: Engine = Depends(get_engine)) -> ImportReconciler:
    return ImportReconciler(
        db,
        fetcher,
        validator,
        default_url=settings.default_feed_url,
        primary_key=settings.primary_key,
        upsert_strategy=settings.upsert_strategy,
    )


#%% APP

app = FastAPI(lifespan=lifespan)


@app.exception_handler(ArticlesError)
async def articles_error_handler(request: Request, exc: ArticlesError):
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})


@app.get("/")
def index():
    return {"endpoints": ENDPOINTS}


@app.get("/health")
def health():
    return {"status": "ok", "ts": int(time.time())}


@app.get("/api/articles")
def list_articles(reader: ArticleReader = Depends(get_reader)):
    return [a.model_dump() for a in reader.list_articles()]


@app.post("/api/articles/import", status_code=201)
def import_articles(
    site_rss_url: Optional[str] = Query(None, alias="siteRssUrl"),
    reconciler: ImportReconciler = Depends(get_reconciler),
):
    # mensagem mais específica que a do reconciler
    if not site_rss_url:
        return JSONResponse(
            status_code=422,
            content={"error": "The siteRssUrl parameter is required and must be a string"},
        )
    if not validator.is_valid_url(site_rss_url):
        return JSONResponse(
            status_code=422,
            content={"error": "The siteRssUrl parameter must be a valid and supported URL"},
        )

    result = reconciler.import_and_save(site_rss_url)
    return result.model_dump(mode="json")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("rssarticles.api.main:app", host="0.0.0.0", port=3001, reload=True)
