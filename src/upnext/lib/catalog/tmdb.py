"""TMDB catalog provider.

Talks to The Movie Database v3 API over HTTP:

* ``GET /{movie|tv}/{id}/recommendations`` for related titles.
* ``GET /search/{movie|tv}?query=...`` for free-text search.

Movies carry their display name in ``title``, TV shows in ``name``; both
are mapped onto :class:`~upnext.models.Candidate`.  Requests are not
retried: the engine treats a failed seed as an empty one.
"""

import logging
from typing import Any

import httpx

from ...config import get_tmdb_api_key, get_tmdb_base_url
from ...models import Candidate, MediaKind
from .base import CatalogError, CatalogProvider

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 15.0


def parse_results(data: Any, kind: MediaKind) -> list[Candidate]:
    """Convert a TMDB paged ``results`` payload into candidates.

    Entries without an id are skipped.  A missing ``vote_average`` counts
    as 0, so such titles never clear the quality floor.
    """
    if not isinstance(data, dict):
        raise CatalogError(f"Unexpected TMDB payload type: {type(data)}")

    title_field = "title" if kind is MediaKind.MOVIE else "name"
    candidates: list[Candidate] = []
    for raw in data.get("results") or []:
        raw_id = raw.get("id")
        if raw_id is None:
            continue
        candidates.append(
            Candidate(
                id=str(raw_id),
                kind=kind,
                title=raw.get(title_field) or "",
                overview=raw.get("overview") or "",
                quality_score=raw.get("vote_average") or 0.0,
            )
        )
    return candidates


class TMDBCatalogProvider(CatalogProvider):
    """Catalog provider backed by the TMDB REST API.

    An ``httpx.AsyncClient`` may be injected (tests use one with a
    ``MockTransport``); otherwise one is created lazily from configuration.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        api_key: str | None = None,
        base_url: str | None = None,
    ):
        self.api_key = api_key if api_key is not None else get_tmdb_api_key()
        self.base_url = base_url or get_tmdb_base_url()
        self._client = client

    @property
    def name(self) -> str:
        return "tmdb"

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={"Accept": "application/json"},
                timeout=REQUEST_TIMEOUT,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def _get(self, endpoint: str, params: dict | None = None) -> Any:
        query = dict(params or {})
        if self.api_key:
            query["api_key"] = self.api_key

        resp = await self._get_client().get(endpoint, params=query)
        resp.raise_for_status()
        return resp.json()

    async def fetch_related(self, item_id: str, kind: MediaKind) -> list[Candidate]:
        data = await self._get(f"/{kind.value}/{item_id}/recommendations")
        return parse_results(data, kind)

    async def search(self, query: str, kind: MediaKind) -> list[Candidate]:
        data = await self._get(f"/search/{kind.value}", {"query": query})
        candidates = parse_results(data, kind)
        logger.debug("TMDB search %r (%s) returned %d results", query, kind.value, len(candidates))
        return candidates
