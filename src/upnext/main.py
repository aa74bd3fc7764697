import logging
from contextlib import asynccontextmanager

from elasticsearch import AsyncElasticsearch
from fastapi import Depends, FastAPI

from .config import get_catalog_name, get_elasticsearch_url, get_fetch_deadline
from .lib.catalog import (
    CatalogProvider,
    SearchIndexCatalogProvider,
    get_provider,
    list_providers,
)
from .lib.recommendations import (
    InMemoryCollectionSource,
    InMemoryLibrarySource,
    RecommendationEngine,
)
from .routers import health, recommendations, sources
from .security import verify_api_key

logger = logging.getLogger(__name__)


def build_provider(name: str) -> CatalogProvider:
    """Instantiate the registered catalog provider called *name*."""
    cls = get_provider(name)
    if cls is None:
        raise RuntimeError(
            f"Unknown catalog provider: {name} (available: {', '.join(list_providers())})"
        )
    if cls is SearchIndexCatalogProvider:
        return cls(AsyncElasticsearch(get_elasticsearch_url()))
    return cls()


@asynccontextmanager
async def lifespan(app: FastAPI):
    provider = build_provider(get_catalog_name())
    app.state.library = InMemoryLibrarySource()
    app.state.collections = InMemoryCollectionSource()
    app.state.engine = RecommendationEngine(
        provider,
        app.state.library,
        app.state.collections,
        fetch_deadline=get_fetch_deadline(),
    )
    logger.info("Recommendation engine ready (catalog: %s)", provider.name)
    try:
        yield
    finally:
        await app.state.engine.aclose()
        await provider.aclose()


app = FastAPI(
    title="Up Next Recommendations",
    description="Ranks titles to watch next from a user's library or themed collections",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(sources.router)
app.include_router(recommendations.router)


@app.get("/", dependencies=[Depends(verify_api_key)])
async def root():
    return {"message": "Up Next Recommendations"}
