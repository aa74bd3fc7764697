"""Shared Elasticsearch utilities for the title search index."""

import logging

from elastic_transport import ObjectApiResponse

from ..errors import CatalogError

logger = logging.getLogger(__name__)


def unwrap_es_response(resp) -> dict:
    """Unwrap an Elasticsearch response, handling both ObjectApiResponse and dict.

    Raises ``CatalogError`` if the response type is unexpected.
    """
    if isinstance(resp, ObjectApiResponse):
        return resp.body
    elif isinstance(resp, dict):
        return resp
    else:
        logger.error("Unexpected Elasticsearch response type: %s", type(resp))
        raise CatalogError("Invalid Elasticsearch response")


def iter_sources(data: dict):
    """Yield ``(hit_id, _source)`` pairs from a search response body."""
    for hit in data.get("hits", {}).get("hits", []):
        yield hit.get("_id"), hit.get("_source") or {}
