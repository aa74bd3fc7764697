"""Search-index catalog provider.

Serves related items and search from a self-hosted Elasticsearch ``titles``
index instead of a remote API.  Each document looks like::

    {"title_id": "603", "kind": "movie", "title": "The Matrix",
     "overview": "...", "vote_average": 8.2}

Related titles come from a ``more_like_this`` query over ``title`` and
``overview`` that uses the seed document as its example, restricted to the
seed's kind.  Search is a ``multi_match`` over the same fields.  Documents
are stored under the id ``"<kind>_<title_id>"``.
"""

import logging

from ...config import get_titles_index
from ...models import Candidate, MediaKind
from ..elasticsearch import iter_sources, unwrap_es_response
from .base import CatalogProvider

logger = logging.getLogger(__name__)

# How many hits to request per query; TMDB pages hold 20 results.
PAGE_SIZE = 20

TEXT_FIELDS = ["title", "overview"]


def _to_candidate(hit_id: str | None, src: dict, kind: MediaKind) -> Candidate | None:
    title_id = src.get("title_id") or hit_id
    if not title_id:
        return None
    return Candidate(
        id=str(title_id),
        kind=kind,
        title=src.get("title") or "",
        overview=src.get("overview") or "",
        quality_score=src.get("vote_average") or 0.0,
    )


class SearchIndexCatalogProvider(CatalogProvider):
    """Catalog provider backed by an ``AsyncElasticsearch`` client."""

    def __init__(self, es, index: str | None = None):
        self.es = es
        self.index = index or get_titles_index()

    @property
    def name(self) -> str:
        return "search_index"

    async def aclose(self) -> None:
        await self.es.close()

    async def _run(self, query: dict, kind: MediaKind) -> list[Candidate]:
        resp = await self.es.search(index=self.index, query=query, size=PAGE_SIZE)
        data = unwrap_es_response(resp)

        candidates: list[Candidate] = []
        for hit_id, src in iter_sources(data):
            candidate = _to_candidate(hit_id, src, kind)
            if candidate is not None:
                candidates.append(candidate)
        return candidates

    async def fetch_related(self, item_id: str, kind: MediaKind) -> list[Candidate]:
        query = {
            "bool": {
                "must": {
                    "more_like_this": {
                        "fields": TEXT_FIELDS,
                        "like": [{"_index": self.index, "_id": f"{kind.value}_{item_id}"}],
                        "min_term_freq": 1,
                        "min_doc_freq": 2,
                    }
                },
                "filter": [{"term": {"kind": kind.value}}],
                "must_not": [{"term": {"title_id": item_id}}],
            }
        }
        return await self._run(query, kind)

    async def search(self, query: str, kind: MediaKind) -> list[Candidate]:
        body = {
            "bool": {
                "must": {"multi_match": {"query": query, "fields": ["title^2", "overview"]}},
                "filter": [{"term": {"kind": kind.value}}],
            }
        }
        candidates = await self._run(body, kind)
        logger.debug("Index search %r (%s) returned %d results", query, kind.value, len(candidates))
        return candidates
