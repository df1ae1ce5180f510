"""
Recommendation Service - Gemini with structured output

This service turns a validated RecommendRequest into a Recommendation using
Google's Gemini model.

Architecture:
- Pattern: Structured-output LLM (single call per attempt, JSON response)
- Model: Gemini 2.5 Flash (GEMINI_MODEL)
- API: Google Gen AI Python SDK (google-genai), async client
- Output: JSON constrained by the Recommendation JSON Schema, then
  re-validated in full by services.validation

The generator is never trusted: its output goes through the same
Recommendation model as any other input. Only weight-sum failures are
retried (GENERATION_MAX_ATTEMPTS); structural failures are reported at once.
"""

import logging
import re

from google import genai
from google.genai import types

from portfolio_recommender.agents.recommendation.prompts import (
    RECOMMENDATION_SYSTEM_PROMPT,
    build_recommendation_user_prompt,
    build_retry_prompt,
)
from portfolio_recommender.config import settings
from portfolio_recommender.exceptions import GenerationError, MissingCredentialsError
from portfolio_recommender.schemas.portfolio import Recommendation, RecommendRequest
from portfolio_recommender.services.validation import validate_recommendation_json

logger = logging.getLogger(__name__)

# Initialize Gemini client (lazy initialization)
_gemini_client = None

# Defaulted fields are listed as required here so the model always emits them
RECOMMENDATION_RESPONSE_SCHEMA = Recommendation.model_json_schema(mode="serialization")


def _get_gemini_client():
    """
    Lazy initialization of Gemini client.

    Returns None when no API key is configured.
    """
    global _gemini_client

    if _gemini_client is not None:
        return _gemini_client

    api_key = settings.GOOGLE_GENERATIVE_AI_API_KEY
    if not api_key:
        logger.warning(
            "GOOGLE_GENERATIVE_AI_API_KEY not configured. Recommendation service will not work."
        )
        return None

    _gemini_client = genai.Client(api_key=api_key)
    logger.info("Gemini client initialized successfully for recommendations")
    return _gemini_client


def _extract_json_text(content: str) -> str:
    """
    Strip markdown code fences and leading prose around a JSON object.

    Structured output normally returns bare JSON, but some responses still
    come wrapped in ```json ... ```.
    """
    json_content = content.strip()

    fenced = re.search(r'```(?:json)?\s*([\s\S]*?)```', json_content, re.IGNORECASE)
    if fenced:
        return fenced.group(1).strip()

    json_start = json_content.find('{')
    if json_start > 0:
        json_content = json_content[json_start:]

    return json_content


async def _call_gemini(client, prompt: str) -> str:
    """Single Gemini call. Returns the raw response text."""
    config = types.GenerateContentConfig(
        system_instruction=RECOMMENDATION_SYSTEM_PROMPT,
        temperature=settings.GENERATION_TEMPERATURE,
        response_mime_type="application/json",
        response_json_schema=RECOMMENDATION_RESPONSE_SCHEMA,
    )

    try:
        response = await client.aio.models.generate_content(
            model=settings.GEMINI_MODEL,
            contents=prompt,
            config=config,
        )
    except Exception as e:
        logger.error(f"Error calling Gemini API: {e}")
        raise GenerationError(str(e) or "Unknown error from LLM") from e

    content = (response.text or "").strip()
    if not content:
        logger.error("Empty text in Gemini response")
        raise GenerationError("Empty response from LLM")

    return content


async def generate_recommendation(request: RecommendRequest) -> Recommendation:
    """
    Generate and validate a portfolio recommendation.

    This function:
    1. Builds the prompt from the validated request
    2. Calls Gemini with the Recommendation schema as response schema
    3. Re-validates the output (structure, defaults, weight sum)
    4. Regenerates when only the weight-sum rule failed

    Args:
        request: Normalized request (defaults already applied)

    Returns:
        Normalized Recommendation

    Raises:
        MissingCredentialsError: No Gemini API key configured
        GenerationError: Provider failure, or output that failed validation
            (failure attached) after all attempts
    """
    logger.info(
        f"generate_recommendation called: risk={request.risk_tolerance}, "
        f"horizon_years={request.horizon_years}"
    )

    client = _get_gemini_client()
    if client is None:
        logger.error("Gemini client not available")
        raise MissingCredentialsError()

    max_attempts = max(1, settings.GENERATION_MAX_ATTEMPTS)
    prompt = build_recommendation_user_prompt(request)
    failure = None

    for attempt in range(1, max_attempts + 1):
        logger.info(f"Calling Gemini API (attempt {attempt}/{max_attempts})...")
        content = await _call_gemini(client, prompt)

        result = validate_recommendation_json(_extract_json_text(content))
        if result.ok:
            logger.info(
                f"Returning recommendation with {len(result.value.portfolio)} positions"
            )
            return result.value

        failure = result.failure
        if not failure.is_invariant:
            logger.error(
                f"Generated recommendation failed structural validation "
                f"({len(failure.issues)} issues)"
            )
            raise GenerationError(
                "Model output did not match the Recommendation schema",
                failure=failure,
            )

        total = failure.issues[0].value
        logger.warning(f"Generated weights summed to {total} on attempt {attempt}")
        prompt = build_retry_prompt(request, total)

    raise GenerationError("Weights must sum to ~100", failure=failure)
