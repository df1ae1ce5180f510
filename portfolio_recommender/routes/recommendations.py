"""
FastAPI routes for the portfolio recommendation endpoint.

Endpoint flow for POST /v1/recommend:
1. Auth: x-api-key checked by require_api_key
2. Parse/Validate: raw body through validate_recommend_request_json (400)
3. Call LLM: generate_recommendation (500 no credentials, 502 provider or
   output failure)
4. Return the re-validated Recommendation
"""

import logging

from fastapi import APIRouter, Depends, Request

from portfolio_recommender.auth.dependencies import require_api_key
from portfolio_recommender.exceptions import InvalidRequestError
from portfolio_recommender.schemas.errors import ErrorResponse, InvalidBodyResponse
from portfolio_recommender.schemas.portfolio import Recommendation
from portfolio_recommender.services.recommendation_service import generate_recommendation
from portfolio_recommender.services.validation import validate_recommend_request_json

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/v1",
    tags=["recommendations"],
    dependencies=[Depends(require_api_key)],
)


@router.post(
    "/recommend",
    response_model=Recommendation,
    status_code=200,
    summary="Generate a portfolio recommendation",
    description="""
    Builds a diversified portfolio for an investment objective and risk profile.

    **Authentication:** Required (`x-api-key` header)

    **Validation:**
    - The body must match `RecommendRequest`; unknown keys are rejected and
      every violation is reported at once (400)
    - The generated portfolio is re-validated against `Recommendation`,
      including the rule that weights sum to 100 (502 if it never does)
    """,
    responses={
        400: {"model": InvalidBodyResponse, "description": "Validation error"},
        401: {"description": "Unauthorized"},
        500: {"model": ErrorResponse, "description": "Missing LLM credentials"},
        502: {"model": ErrorResponse, "description": "LLM provider error"},
    },
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {
                    "schema": {"$ref": "#/components/schemas/RecommendRequest"}
                }
            },
        }
    },
)
async def recommend_endpoint(request: Request) -> Recommendation:
    """
    Recommendation endpoint.

    The body is read raw rather than declared as a parameter so malformed
    JSON, non-object bodies and field errors all come back in the same 400
    shape.
    """
    raw_body = await request.body()

    parsed = validate_recommend_request_json(raw_body)
    if not parsed.ok:
        raise InvalidRequestError(parsed.failure)

    logger.info(
        f"POST /v1/recommend called, objective='{parsed.value.objective[:50]}'"
    )

    recommendation = await generate_recommendation(parsed.value)

    logger.info(f"Returning recommendation with {len(recommendation.portfolio)} positions")
    return recommendation
