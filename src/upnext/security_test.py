import os
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from .main import app
from .security import key_matches


@pytest.fixture
def api_key():
    return "test-api-key-12345"


@pytest.fixture
def client_with_api_key(api_key):
    with patch.dict(os.environ, {"API_KEY": api_key, "UPNEXT_CATALOG": "tmdb"}):
        with TestClient(app) as client:
            yield client, api_key


@pytest.fixture
def client_without_configured_key():
    with patch.dict(os.environ, {}, clear=False):
        os.environ.pop("API_KEY", None)
        with TestClient(app) as client:
            yield client


class TestRootEndpointAuth:
    def test_root_returns_401_without_api_key(self, client_with_api_key):
        client, _ = client_with_api_key
        response = client.get("/")
        assert response.status_code == 401

    def test_root_returns_401_with_invalid_api_key(self, client_with_api_key):
        client, _ = client_with_api_key
        response = client.get("/", headers={"X-API-Key": "invalid-key"})
        assert response.status_code == 401
        assert response.json() == {"detail": "Invalid or missing API key"}

    def test_root_returns_200_with_valid_api_key(self, client_with_api_key):
        client, api_key = client_with_api_key
        response = client.get("/", headers={"X-API-Key": api_key})
        assert response.status_code == 200
        assert response.json() == {"message": "Up Next Recommendations"}


class TestProtectedRoutes:
    def test_snapshot_route_requires_key(self, client_with_api_key):
        client, _ = client_with_api_key
        response = client.put("/collections/c1", json={"name": "Horror", "entries": []})
        assert response.status_code == 401

    def test_everything_rejected_when_no_key_configured(self, client_without_configured_key):
        response = client_without_configured_key.get(
            "/recommendations/library/movie", headers={"X-API-Key": ""}
        )
        assert response.status_code == 401


class TestHealthEndpointNoAuth:
    def test_health_returns_200_without_api_key(self, client_with_api_key):
        client, _ = client_with_api_key
        response = client.get("/health")
        assert response.status_code == 200

    def test_health_reports_catalog(self, client_with_api_key):
        client, _ = client_with_api_key
        response = client.get("/health")
        assert response.json()["status"] == "ok"
        assert response.json()["catalog"] == "tmdb"


class TestKeyMatches:
    def test_exact_match(self):
        assert key_matches("abc", "abc") is True

    def test_mismatch(self):
        assert key_matches("abd", "abc") is False

    def test_unconfigured_key_matches_nothing(self):
        assert key_matches("", "") is False
        assert key_matches("abc", None) is False

    def test_missing_presented_key(self):
        assert key_matches(None, "abc") is False


def test_rejection_is_logged(client_with_api_key, caplog):
    client, _ = client_with_api_key
    with caplog.at_level("WARNING", logger="upnext.security"):
        client.get("/", headers={"X-API-Key": "nope"})
    assert "Rejected GET /: invalid API key" in caplog.text
