"""
Health check route for the Portfolio Recommender API.

This endpoint is PUBLIC (no API key required) and provides a simple
status check for load balancers, monitoring, and deployment verification.
"""

from fastapi import APIRouter

from portfolio_recommender.schemas.health import HealthResponse
from portfolio_recommender.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["system"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check endpoint",
    description=(
        "Public health check endpoint (no API key required). "
        "Returns a simple status indicator for monitoring and load balancing."
    ),
    status_code=200,
)
async def health_check() -> HealthResponse:
    """Public health check; never touches Gemini."""
    logger.debug("Health check endpoint called")

    return HealthResponse(status="ok")
