"""Taste-based recommendation pipeline.

Seeds are picked from the user's library or a themed collection, their
related items are fetched concurrently, and the merged candidates are ranked
by how many seeds agree on them, their relevance to the collection's theme
and their average vote.
"""

from .engine import RecommendationEngine, RecomputeHandle
from .sources import (
    CollectionSource,
    InMemoryCollectionSource,
    InMemoryLibrarySource,
    LibrarySource,
)

__all__ = [
    "CollectionSource",
    "InMemoryCollectionSource",
    "InMemoryLibrarySource",
    "LibrarySource",
    "RecommendationEngine",
    "RecomputeHandle",
]
