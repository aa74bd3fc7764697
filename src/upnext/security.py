"""API-key guard shared by every router except ``/health``.

The client sends its key in ``X-API-Key``; the service compares it with
``API_KEY`` on every request, so a changed key takes effect without a
restart.
"""

import logging
import secrets
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader

from .config import get_api_key

API_KEY_HEADER_NAME = "X-API-Key"

api_key_header = APIKeyHeader(name=API_KEY_HEADER_NAME, auto_error=False)

logger = logging.getLogger(__name__)


def key_matches(presented: str | None, expected: str | None) -> bool:
    """Constant-time comparison; an unconfigured key matches nothing."""
    if not expected or not presented:
        return False
    return secrets.compare_digest(presented.encode(), expected.encode())


async def verify_api_key(
    request: Request,
    api_key: Annotated[str | None, Depends(api_key_header)],
) -> str:
    if not key_matches(api_key, get_api_key()):
        logger.warning(
            "Rejected %s %s: %s API key",
            request.method,
            request.url.path,
            "missing" if not api_key else "invalid",
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key",
        )
    return api_key
