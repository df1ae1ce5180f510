"""
FastAPI application entry point for the Portfolio Recommender API.

This module creates the FastAPI app instance, registers routers and error
handlers, and assembles the OpenAPI document served at /openapi.json.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi

from portfolio_recommender.config import settings
from portfolio_recommender.exception_handlers import register_exception_handlers
from portfolio_recommender.routes.health import router as health_router
from portfolio_recommender.routes.recommendations import router as recommendations_router
from portfolio_recommender.schemas.portfolio import RecommendRequest

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)

API_TITLE = "Portfolio Recommender API"
API_VERSION = "1.0.0"


def _get_cors_origins() -> list[str]:
    """
    Get allowed CORS origins based on environment.

    - ENVIRONMENT=production: only CORS_ALLOWED_ORIGINS (none if unset)
    - anything else: all origins, for local development

    Returns:
        List of allowed origin URLs, or ["*"] for development.
    """
    if settings.is_production():
        origins = settings.CORS_ALLOWED_ORIGINS
        if origins:
            logger.info(f"CORS configured for production with {len(origins)} allowed origins")
        else:
            logger.warning(
                "CORS_ALLOWED_ORIGINS not set in production. "
                "No web origins allowed."
            )
        return origins

    logger.info(f"CORS configured for {settings.ENVIRONMENT}: allowing all origins")
    return ["*"]


# Create FastAPI app
app = FastAPI(
    title=API_TITLE,
    description="Generates diversified portfolio recommendations with Gemini",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc"
)

register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_get_cors_origins(),
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(health_router)
app.include_router(recommendations_router)


def custom_openapi() -> dict:
    """
    OpenAPI document with the request body schema published as a component.

    POST /v1/recommend reads its body raw, so FastAPI cannot discover
    RecommendRequest on its own; the route references it by $ref.
    """
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=API_TITLE,
        version=API_VERSION,
        description=app.description,
        routes=app.routes,
    )

    request_schema = RecommendRequest.model_json_schema(
        ref_template="#/components/schemas/{model}"
    )
    components = openapi_schema.setdefault("components", {}).setdefault("schemas", {})
    components.update(request_schema.pop("$defs", {}))
    components["RecommendRequest"] = request_schema

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi

logger.info("FastAPI app initialized successfully")
