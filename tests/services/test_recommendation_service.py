"""
Tests for the Recommendation Service.

These tests verify:
- Prompt building from a validated request
- JSON extraction from model text
- The Gemini call configuration (system instruction, JSON schema)
- Re-validation of generated output
- Retry on weight-sum failures only
- Credential and provider error handling

Note: These tests use mocked Gemini responses to avoid actual API calls
and ensure deterministic test behavior.
"""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from portfolio_recommender.agents.recommendation.prompts import (
    RECOMMENDATION_SYSTEM_PROMPT,
    build_recommendation_user_prompt,
    build_retry_prompt,
)
from portfolio_recommender.config import settings
from portfolio_recommender.exceptions import GenerationError, MissingCredentialsError
from portfolio_recommender.schemas.portfolio import Recommendation, RecommendRequest
from portfolio_recommender.services import recommendation_service
from portfolio_recommender.services.recommendation_service import (
    RECOMMENDATION_RESPONSE_SCHEMA,
    _extract_json_text,
    _get_gemini_client,
    generate_recommendation,
)


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def house_request():
    return RecommendRequest(
        objective="grow savings for a house",
        risk_tolerance="high",
        horizon_years=10,
    )


def gemini_response(payload):
    """Mock Gemini response whose text is the given payload (JSON-encoded unless str)."""
    mock_response = MagicMock()
    mock_response.text = payload if isinstance(payload, str) else json.dumps(payload)
    return mock_response


@pytest.fixture
def mock_gemini():
    """
    Patch the lazy client getter and yield the client's async generate_content
    mock. Tests set return_value or side_effect on it.
    """
    with patch.object(recommendation_service, "_get_gemini_client") as mock_get_client:
        client = MagicMock()
        client.aio.models.generate_content = AsyncMock()
        mock_get_client.return_value = client
        yield client.aio.models.generate_content


# =============================================================================
# UNIT TESTS: Prompt Building
# =============================================================================

class TestPromptBuilding:
    """Tests for build_recommendation_user_prompt."""

    def test_prompt_lists_request_fields(self, house_request):
        prompt = build_recommendation_user_prompt(house_request)

        assert prompt == (
            "Objective: grow savings for a house\n"
            "Risk: high\n"
            "Horizon (years): 10\n"
            "Constraints: {}"
        )

    def test_prompt_uses_defaults(self):
        prompt = build_recommendation_user_prompt(RecommendRequest(objective="retire early"))

        assert "Risk: medium" in prompt
        assert "Horizon (years): 5" in prompt

    def test_prompt_serializes_only_supplied_constraints(self):
        request = RecommendRequest.model_validate({
            "objective": "ethical growth",
            "constraints": {"exclude": ["TSLA", "crypto"]},
        })

        prompt = build_recommendation_user_prompt(request)

        assert 'Constraints: {"exclude":["TSLA","crypto"]}' in prompt
        assert "max_single_weight" not in prompt

    def test_prompt_serializes_weight_cap(self):
        request = RecommendRequest.model_validate({
            "objective": "ethical growth",
            "constraints": {"max_single_weight": 25},
        })

        constraints_line = build_recommendation_user_prompt(request).splitlines()[-1]

        assert json.loads(constraints_line.removeprefix("Constraints: ")) == {"max_single_weight": 25}

    def test_prompt_keeps_unicode(self):
        request = RecommendRequest.model_validate({
            "objective": "épargne retraite",
            "constraints": {"exclude": ["énergie fossile"]},
        })

        prompt = build_recommendation_user_prompt(request)

        assert "épargne retraite" in prompt
        assert "énergie fossile" in prompt

    def test_retry_prompt_mentions_previous_sum(self, house_request):
        prompt = build_retry_prompt(house_request, 99.4)

        assert prompt.startswith(build_recommendation_user_prompt(house_request))
        assert "summed to 99.4" in prompt
        assert "exactly 100" in prompt

    def test_system_prompt_states_weight_rule(self):
        assert "weights sum to 100" in RECOMMENDATION_SYSTEM_PROMPT
        assert "low-fee ETFs" in RECOMMENDATION_SYSTEM_PROMPT


# =============================================================================
# UNIT TESTS: JSON extraction
# =============================================================================

class TestExtractJsonText:
    """Tests for _extract_json_text."""

    def test_bare_json_unchanged(self):
        assert _extract_json_text('{"version": "1"}') == '{"version": "1"}'

    def test_json_code_fence(self):
        content = 'Here you go:\n```json\n{"version": "1"}\n```\nGood luck!'
        assert _extract_json_text(content) == '{"version": "1"}'

    def test_plain_code_fence(self):
        assert _extract_json_text('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_leading_prose(self):
        assert _extract_json_text('Sure! {"a": 1}') == '{"a": 1}'


# =============================================================================
# UNIT TESTS: Response schema handed to Gemini
# =============================================================================

class TestResponseSchema:

    def test_schema_requires_all_fields(self):
        required = set(RECOMMENDATION_RESPONSE_SCHEMA["required"])
        assert {"version", "objective", "portfolio", "notes", "disclaimers"} <= required

    def test_schema_describes_positions(self):
        position = RECOMMENDATION_RESPONSE_SCHEMA["$defs"]["Position"]
        assert position["properties"]["weight"]["maximum"] == 100
        assert position["additionalProperties"] is False


# =============================================================================
# UNIT TESTS: Client initialization
# =============================================================================

class TestGeminiClient:

    def test_no_api_key_returns_none(self):
        with patch.object(recommendation_service, "_gemini_client", None), \
                patch.object(settings, "GOOGLE_GENERATIVE_AI_API_KEY", ""):
            assert _get_gemini_client() is None

    def test_client_created_once(self):
        with patch.object(recommendation_service, "_gemini_client", None), \
                patch.object(settings, "GOOGLE_GENERATIVE_AI_API_KEY", "key"), \
                patch.object(recommendation_service.genai, "Client") as mock_client_cls:
            first = _get_gemini_client()
            second = _get_gemini_client()

        assert first is second
        mock_client_cls.assert_called_once_with(api_key="key")


# =============================================================================
# INTEGRATION TESTS: Mocked Gemini API
# =============================================================================

class TestGenerateRecommendation:
    """generate_recommendation with a mocked Gemini client."""

    @pytest.mark.asyncio
    async def test_successful_generation(
        self, mock_gemini, house_request, valid_recommendation_payload
    ):
        mock_gemini.return_value = gemini_response(valid_recommendation_payload)

        result = await generate_recommendation(house_request)

        assert isinstance(result, Recommendation)
        assert len(result.portfolio) == 3
        assert result.disclaimers == ["This is not financial advice. Do your own research."]
        mock_gemini.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_gemini_call_configuration(
        self, mock_gemini, house_request, valid_recommendation_payload
    ):
        mock_gemini.return_value = gemini_response(valid_recommendation_payload)

        await generate_recommendation(house_request)

        kwargs = mock_gemini.await_args.kwargs
        assert kwargs["model"] == settings.GEMINI_MODEL
        assert kwargs["contents"] == build_recommendation_user_prompt(house_request)
        config = kwargs["config"]
        assert config.system_instruction == RECOMMENDATION_SYSTEM_PROMPT
        assert config.response_mime_type == "application/json"
        assert config.response_json_schema == RECOMMENDATION_RESPONSE_SCHEMA

    @pytest.mark.asyncio
    async def test_fenced_output_is_accepted(
        self, mock_gemini, house_request, valid_recommendation_payload
    ):
        fenced = f"```json\n{json.dumps(valid_recommendation_payload)}\n```"
        mock_gemini.return_value = gemini_response(fenced)

        result = await generate_recommendation(house_request)

        assert result.version == "1"

    @pytest.mark.asyncio
    async def test_missing_credentials(self, house_request):
        with patch.object(recommendation_service, "_get_gemini_client", return_value=None):
            with pytest.raises(MissingCredentialsError) as exc_info:
                await generate_recommendation(house_request)

        assert exc_info.value.message == "Missing LLM credentials"
        assert exc_info.value.code == "LLM_CONFIG_ERROR"

    @pytest.mark.asyncio
    async def test_provider_exception_is_wrapped(self, mock_gemini, house_request):
        mock_gemini.side_effect = RuntimeError("quota exceeded")

        with pytest.raises(GenerationError) as exc_info:
            await generate_recommendation(house_request)

        assert exc_info.value.message == "quota exceeded"
        assert exc_info.value.failure is None
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_empty_response(self, mock_gemini, house_request):
        mock_gemini.return_value = gemini_response("")

        with pytest.raises(GenerationError) as exc_info:
            await generate_recommendation(house_request)

        assert "Empty response" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_none_text_response(self, mock_gemini, house_request):
        response = MagicMock()
        response.text = None
        mock_gemini.return_value = response

        with pytest.raises(GenerationError):
            await generate_recommendation(house_request)

    @pytest.mark.asyncio
    async def test_unparseable_output_is_structural(self, mock_gemini, house_request):
        mock_gemini.return_value = gemini_response("I cannot help with that.")

        with pytest.raises(GenerationError) as exc_info:
            await generate_recommendation(house_request)

        assert exc_info.value.failure.kind == "structural"
        assert exc_info.value.failure.issues[0].constraint == "json_invalid"
        mock_gemini.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_structural_failure_is_not_retried(
        self, mock_gemini, house_request, recommendation_factory
    ):
        mock_gemini.return_value = gemini_response(recommendation_factory(version="2"))

        with pytest.raises(GenerationError) as exc_info:
            await generate_recommendation(house_request)

        assert exc_info.value.failure.kind == "structural"
        assert exc_info.value.failure.issues[0].path == ["version"]
        mock_gemini.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_invariant_failure_is_retried(
        self, mock_gemini, house_request, recommendation_factory
    ):
        mock_gemini.side_effect = [
            gemini_response(recommendation_factory(weights=(60, 30))),
            gemini_response(recommendation_factory(weights=(60, 40))),
        ]

        with patch.object(settings, "GENERATION_MAX_ATTEMPTS", 2):
            result = await generate_recommendation(house_request)

        assert [p.weight for p in result.portfolio] == [60, 40]
        assert mock_gemini.await_count == 2
        retry_prompt = mock_gemini.await_args_list[1].kwargs["contents"]
        assert "summed to 90" in retry_prompt

    @pytest.mark.asyncio
    async def test_invariant_failure_after_all_attempts(
        self, mock_gemini, house_request, recommendation_factory
    ):
        mock_gemini.return_value = gemini_response(recommendation_factory(weights=(60, 39.4)))

        with patch.object(settings, "GENERATION_MAX_ATTEMPTS", 3):
            with pytest.raises(GenerationError) as exc_info:
                await generate_recommendation(house_request)

        assert mock_gemini.await_count == 3
        assert exc_info.value.failure.kind == "invariant"
        assert exc_info.value.failure.issues[0].constraint == "weights_sum"
        assert "Weights must sum to ~100" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_single_attempt_configuration(
        self, mock_gemini, house_request, recommendation_factory
    ):
        mock_gemini.return_value = gemini_response(recommendation_factory(portfolio=[]))

        with patch.object(settings, "GENERATION_MAX_ATTEMPTS", 1):
            with pytest.raises(GenerationError) as exc_info:
                await generate_recommendation(house_request)

        mock_gemini.assert_awaited_once()
        assert exc_info.value.failure.is_invariant
