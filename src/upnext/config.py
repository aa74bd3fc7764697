"""Environment-driven settings.

Values are read on every call rather than cached at import time so tests
can patch ``os.environ``.
"""

import os

DEFAULT_CATALOG = "tmdb"
DEFAULT_TMDB_BASE_URL = "https://api.themoviedb.org/3"
DEFAULT_ELASTICSEARCH_URL = "http://localhost:9200"
DEFAULT_TITLES_INDEX = "titles"
DEFAULT_FETCH_DEADLINE_SECONDS = 10.0


def get_api_key() -> str | None:
    return os.environ.get("API_KEY")


def get_catalog_name() -> str:
    """Name of the registered catalog provider to use (``tmdb`` or ``search_index``)."""
    return os.environ.get("UPNEXT_CATALOG", DEFAULT_CATALOG)


def get_tmdb_api_key() -> str | None:
    return os.environ.get("TMDB_API_KEY")


def get_tmdb_base_url() -> str:
    return os.environ.get("TMDB_BASE_URL", DEFAULT_TMDB_BASE_URL)


def get_elasticsearch_url() -> str:
    return os.environ.get("ELASTICSEARCH_URL", DEFAULT_ELASTICSEARCH_URL)


def get_titles_index() -> str:
    return os.environ.get("UPNEXT_TITLES_INDEX", DEFAULT_TITLES_INDEX)


def get_fetch_deadline() -> float | None:
    """Overall deadline for one run's related-items fan-out.

    ``0`` or a negative value disables the deadline.
    """
    raw = os.environ.get("UPNEXT_FETCH_DEADLINE_SECONDS")
    if raw is None or raw == "":
        return DEFAULT_FETCH_DEADLINE_SECONDS
    value = float(raw)
    return value if value > 0 else None
