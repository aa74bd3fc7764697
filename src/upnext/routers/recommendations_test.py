"""Tests for the recommendations and snapshot routers."""

import os

import pytest
from fastapi.testclient import TestClient

from ..dependencies import get_collections, get_engine, get_library
from ..lib.catalog.base import CatalogProvider
from ..lib.recommendations import (
    InMemoryCollectionSource,
    InMemoryLibrarySource,
    RecommendationEngine,
)
from ..main import app
from ..models import Candidate, MediaKind


class FakeCatalog(CatalogProvider):
    @property
    def name(self) -> str:
        return "fake"

    async def fetch_related(self, item_id, kind):
        related = {
            "603": [
                {"id": "604", "title": "The Matrix Reloaded", "vote_average": 7.0},
                {"id": "1891", "title": "The Empire Strikes Back", "vote_average": 8.4},
            ],
            "11": [
                {"id": "1891", "title": "The Empire Strikes Back", "vote_average": 8.4},
                {"id": "5", "title": "Low Rated", "vote_average": 4.0},
            ],
        }
        return [
            Candidate(id=r["id"], kind=kind, title=r["title"], quality_score=r["vote_average"])
            for r in related.get(item_id, [])
        ]

    async def search(self, query, kind):
        return [
            Candidate(id="900", kind=kind, title="Elf", overview="Buddy meets Santa", quality_score=7.0),
            Candidate(id="901", kind=kind, title="Heat", overview="A heist", quality_score=8.3),
        ]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def fake_engine():
    """Swap in a fake-backed engine and API key for every test, then clean up."""
    library = InMemoryLibrarySource()
    collections = InMemoryCollectionSource()
    engine = RecommendationEngine(FakeCatalog(), library, collections)

    prev = os.environ.get("API_KEY")
    os.environ["API_KEY"] = "testkey"
    app.dependency_overrides[get_engine] = lambda: engine
    app.dependency_overrides[get_library] = lambda: library
    app.dependency_overrides[get_collections] = lambda: collections
    yield engine
    app.dependency_overrides.clear()
    if prev is None:
        del os.environ["API_KEY"]
    else:
        os.environ["API_KEY"] = prev


@pytest.fixture
def client():
    with TestClient(app, headers=HEADERS) as c:
        yield c


HEADERS = {"X-API-Key": "testkey"}

LIBRARY = [
    {"id": "603", "kind": "movie", "added_at": "2024-05-01T10:00:00", "user_rating": "positive"},
    {"id": "11", "kind": "movie", "added_at": "2024-05-02T10:00:00", "is_completed": True,
     "completed_at": "2024-05-03T21:00:00"},
]


# ---------------------------------------------------------------------------
# Snapshots
# ---------------------------------------------------------------------------

def test_replace_library(client, fake_engine):
    resp = client.put("/library/movie", json=LIBRARY)
    assert resp.status_code == 200
    assert resp.json() == {"id": "movie", "count": 2}
    assert [i.id for i in fake_engine.library.items(MediaKind.MOVIE)] == ["603", "11"]


def test_replace_library_rejects_wrong_kind(client):
    resp = client.put("/library/tv", json=LIBRARY)
    assert resp.status_code == 422


def test_replace_collection(client, fake_engine):
    resp = client.put("/collections/xmas", json={"name": "Christmas Movies", "entries": []})
    assert resp.status_code == 200
    assert resp.json() == {"id": "xmas", "count": 0}
    assert fake_engine.collections.get("xmas").name == "Christmas Movies"


# ---------------------------------------------------------------------------
# Recompute
# ---------------------------------------------------------------------------

def test_recompute_and_wait_publishes(client):
    client.put("/library/movie", json=LIBRARY)

    resp = client.post(
        "/recommendations/recompute?wait=true",
        json={"kind": "movie", "source": "library", "excluded_ids": ["604"]},
    )
    assert resp.status_code == 200
    assert resp.json() == {"slot": "library:movie", "generation": 1, "published": True}

    state = client.get("/recommendations/library/movie").json()
    assert state["computing"] is False
    assert state["generation"] == 1
    ids = [r["candidate"]["id"] for r in state["results"]]
    # 1891 is recommended by both seeds; 604 is excluded; 5 is below the quality floor.
    assert ids == ["1891"]
    assert state["results"][0]["frequency"] == 2


def test_recompute_without_wait_is_accepted(client):
    resp = client.post("/recommendations/recompute", json={"kind": "tv", "source": "library"})
    assert resp.status_code == 202
    body = resp.json()
    assert body["slot"] == "library:tv"
    assert body["generation"] == 1
    assert body["published"] is None


def test_generation_increments_per_slot(client):
    for expected in (1, 2, 3):
        resp = client.post(
            "/recommendations/recompute?wait=true", json={"kind": "movie", "source": "library"}
        )
        assert resp.json()["generation"] == expected


def test_collection_fallback_search(client):
    client.put("/collections/xmas", json={"name": "Christmas Movies", "entries": []})

    resp = client.post(
        "/recommendations/recompute?wait=true",
        json={"kind": "movie", "source": "collection", "collection_id": "xmas"},
    )
    assert resp.status_code == 200

    state = client.get("/recommendations/collection/movie").json()
    assert state["collection_id"] == "xmas"
    assert [r["candidate"]["id"] for r in state["results"]] == ["900"]


def test_collection_context_requires_id(client):
    resp = client.post(
        "/recommendations/recompute", json={"kind": "movie", "source": "collection"}
    )
    assert resp.status_code == 422


def test_unknown_kind_is_rejected(client):
    resp = client.post("/recommendations/recompute", json={"kind": "book", "source": "library"})
    assert resp.status_code == 422
    assert client.get("/recommendations/library/book").status_code == 422


def test_state_of_untouched_slot(client):
    resp = client.get("/recommendations/collection/tv")
    assert resp.status_code == 200
    assert resp.json() == {
        "slot": "collection:tv",
        "generation": 0,
        "computing": False,
        "collection_id": None,
        "results": [],
    }


def test_requires_api_key():
    with TestClient(app) as anonymous:
        resp = anonymous.get("/recommendations/library/movie")
    assert resp.status_code == 401
