"""Tests for the TMDB catalog provider."""

import httpx
import pytest

from ...errors import CatalogError
from ...models import MediaKind
from .tmdb import TMDBCatalogProvider, parse_results

BASE_URL = "https://tmdb.test/3"


def make_provider(handler, api_key="secret"):
    client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    return TMDBCatalogProvider(client=client, api_key=api_key, base_url=BASE_URL)


class TestParseResults:
    def test_movie_fields(self):
        data = {"results": [
            {"id": 603, "title": "The Matrix", "overview": "Neo wakes up", "vote_average": 8.2},
        ]}
        [c] = parse_results(data, MediaKind.MOVIE)
        assert c.id == "603"
        assert c.kind is MediaKind.MOVIE
        assert c.title == "The Matrix"
        assert c.overview == "Neo wakes up"
        assert c.quality_score == 8.2

    def test_tv_uses_name(self):
        data = {"results": [{"id": 1396, "name": "Breaking Bad", "vote_average": 8.9}]}
        [c] = parse_results(data, MediaKind.TV)
        assert c.title == "Breaking Bad"
        assert c.overview == ""

    def test_missing_vote_and_id(self):
        data = {"results": [
            {"title": "No id"},
            {"id": 7, "title": "Unrated", "overview": None, "vote_average": None},
        ]}
        [c] = parse_results(data, MediaKind.MOVIE)
        assert c.id == "7"
        assert c.quality_score == 0.0

    def test_missing_results_key(self):
        assert parse_results({"page": 1}, MediaKind.MOVIE) == []

    def test_rejects_non_object_payload(self):
        with pytest.raises(CatalogError):
            parse_results(["not", "a", "page"], MediaKind.MOVIE)


class TestTMDBCatalogProvider:
    @pytest.mark.asyncio
    async def test_name(self):
        provider = make_provider(lambda request: httpx.Response(200, json={}))
        assert provider.name == "tmdb"
        await provider.aclose()

    @pytest.mark.asyncio
    async def test_fetch_related_hits_recommendations_endpoint(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"results": [
                {"id": 1, "name": "Better Call Saul", "vote_average": 8.7},
            ]})

        provider = make_provider(handler)
        result = await provider.fetch_related("1396", MediaKind.TV)

        assert [c.title for c in result] == ["Better Call Saul"]
        assert requests[0].url.path == "/3/tv/1396/recommendations"
        assert requests[0].url.params["api_key"] == "secret"
        await provider.aclose()

    @pytest.mark.asyncio
    async def test_search_sends_query(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"results": [{"id": 2, "title": "Elf", "vote_average": 7.0}]})

        provider = make_provider(handler)
        result = await provider.search("christmas", MediaKind.MOVIE)

        assert [c.id for c in result] == ["2"]
        assert requests[0].url.path == "/3/search/movie"
        assert requests[0].url.params["query"] == "christmas"
        await provider.aclose()

    @pytest.mark.asyncio
    async def test_omits_api_key_when_unset(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"results": []})

        provider = make_provider(handler, api_key="")
        await provider.fetch_related("5", MediaKind.MOVIE)
        assert "api_key" not in requests[0].url.params
        await provider.aclose()

    @pytest.mark.asyncio
    async def test_http_error_raises(self):
        provider = make_provider(lambda request: httpx.Response(404, json={"status_code": 34}))
        with pytest.raises(httpx.HTTPStatusError):
            await provider.fetch_related("999999", MediaKind.MOVIE)
        await provider.aclose()
