"""
FastAPI dependency for API-key authentication.

Every /v1 endpoint runs require_api_key() before any other logic. The key is
a shared secret (API_KEY) sent by the caller in the x-api-key header.
"""

import hmac
import logging
from typing import Annotated, Optional

from fastapi import HTTPException, Security, status
from fastapi.security import APIKeyHeader

from portfolio_recommender.config import settings

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-api-key"

# auto_error=False so a missing header produces our 401 body instead of a 403
api_key_header = APIKeyHeader(
    name=API_KEY_HEADER,
    scheme_name="ApiKeyAuth",
    description="Shared API key issued with generate-api-key",
    auto_error=False,
)


def _unauthorized(details: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": "unauthorized", "details": details},
    )


async def require_api_key(
    api_key: Annotated[Optional[str], Security(api_key_header)] = None,
) -> None:
    """
    Verify the x-api-key header against the configured API_KEY.

    Raises:
        HTTPException: 401 if the header is missing or does not match, or if
            no API_KEY is configured at all (every request is rejected)

    Usage:
        @router.post("/recommend", dependencies=[Depends(require_api_key)])
        async def recommend(...):
            pass
    """
    if not api_key:
        logger.warning(f"Missing {API_KEY_HEADER} header")
        raise _unauthorized(f"Missing {API_KEY_HEADER} header")

    expected = settings.API_KEY
    if not expected:
        logger.error("API_KEY not configured; rejecting request")
        raise _unauthorized("Invalid API key")

    if not hmac.compare_digest(api_key.encode("utf-8"), expected.encode("utf-8")):
        logger.warning("Invalid API key presented")
        raise _unauthorized("Invalid API key")
