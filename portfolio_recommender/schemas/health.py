"""
Health check endpoint schemas.

The health endpoint is PUBLIC (no API key required) and returns
a simple status indicator.
"""

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    """
    Response model for GET /health.

    Used by load balancers, uptime monitors and deployment checks.
    """
    model_config = ConfigDict(
        json_schema_extra={"example": {"status": "ok", "service": "portfolio-recommender"}}
    )

    status: str = Field(
        default="ok",
        description="Health status of the API (always 'ok' if responding)",
        examples=["ok"]
    )
    service: str = Field(
        default="portfolio-recommender",
        description="Service name",
    )
