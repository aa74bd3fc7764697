"""Request-scoped accessors for objects created in the app lifespan.

Routes depend on these rather than reading ``app.state`` directly so tests
can swap in their own engine via ``app.dependency_overrides``.
"""

from fastapi import Request

from .lib.recommendations import (
    InMemoryCollectionSource,
    InMemoryLibrarySource,
    RecommendationEngine,
)


def get_engine(request: Request) -> RecommendationEngine:
    return request.app.state.engine


def get_library(request: Request) -> InMemoryLibrarySource:
    return request.app.state.library


def get_collections(request: Request) -> InMemoryCollectionSource:
    return request.app.state.collections
