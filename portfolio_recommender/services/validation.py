"""
Contract validation for the recommendation endpoint.

Two pure validators sit on either side of the Gemini call:

- validate_recommend_request(): untrusted request body -> RecommendRequest
- validate_recommendation(): untrusted model output -> Recommendation

Neither raises on bad input. Both return a ValidationResult that holds either
the normalized model (defaults applied) or a ValidationFailure listing every
violated rule. Response failures are split into "structural" (some field is
wrong) and "invariant" (fields are fine, weights do not sum to 100) so the
caller can decide whether regenerating is worthwhile.
"""

from dataclasses import dataclass
from typing import Any, Generic, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from portfolio_recommender.schemas.errors import ValidationFailure, ValidationIssue
from portfolio_recommender.schemas.portfolio import (
    WEIGHT_SUM_ERROR,
    Recommendation,
    RecommendRequest,
)

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True)
class ValidationResult(Generic[ModelT]):
    """
    Outcome of a validation call.

    Exactly one of value/failure is set.
    """
    value: Optional[ModelT] = None
    failure: Optional[ValidationFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


def issues_from_errors(errors: List[dict]) -> List[ValidationIssue]:
    """Convert pydantic error dicts into ValidationIssue models."""
    issues = []
    for error in errors:
        constraint = error["type"]
        if constraint == "missing":
            value = None
        elif constraint == WEIGHT_SUM_ERROR:
            value = error.get("ctx", {}).get("total")
        else:
            value = error.get("input")
        # Undecodable raw bodies would break JSON serialization of the issue
        if isinstance(value, (bytes, bytearray)):
            value = bytes(value).decode("utf-8", errors="replace")

        issues.append(ValidationIssue(
            path=list(error["loc"]),
            constraint=constraint,
            message=error["msg"],
            value=value,
        ))
    return issues


def failure_from_error(exc: PydanticValidationError) -> ValidationFailure:
    issues = issues_from_errors(exc.errors(include_url=False))
    # The weight-sum rule only runs after every field passed, so it never
    # shares a failure with structural issues.
    if all(issue.constraint == WEIGHT_SUM_ERROR for issue in issues):
        kind = "invariant"
    else:
        kind = "structural"
    return ValidationFailure(kind=kind, issues=issues)


def _validate(
    model: Type[ModelT],
    payload: Any,
    from_json: bool = False,
) -> ValidationResult[ModelT]:
    try:
        if from_json:
            value = model.model_validate_json(payload)
        else:
            value = model.model_validate(payload)
    except PydanticValidationError as exc:
        return ValidationResult(failure=failure_from_error(exc))
    return ValidationResult(value=value)


def validate_recommend_request(payload: Any) -> ValidationResult[RecommendRequest]:
    """
    Validate an already-decoded request body.

    Args:
        payload: Any JSON-like value (dict, list, scalar, None)

    Returns:
        ValidationResult with a normalized RecommendRequest, or a structural
        failure listing every violated field
    """
    return _validate(RecommendRequest, payload)


def validate_recommend_request_json(raw: Union[str, bytes]) -> ValidationResult[RecommendRequest]:
    """Same as validate_recommend_request() for a raw body; bad JSON is a json_invalid issue."""
    return _validate(RecommendRequest, raw, from_json=True)


def validate_recommendation(payload: Any) -> ValidationResult[Recommendation]:
    """
    Validate a candidate recommendation produced by the generator.

    Defaults for constraints, notes and disclaimers are applied during
    validation. When all fields are valid, the weights are summed and the sum
    rounded half up must be exactly 100; otherwise the failure kind is
    "invariant".

    Args:
        payload: Any JSON-like value, typically decoded model output

    Returns:
        ValidationResult with a normalized Recommendation, or a failure
    """
    return _validate(Recommendation, payload)


def validate_recommendation_json(raw: Union[str, bytes]) -> ValidationResult[Recommendation]:
    """Same as validate_recommendation() for raw JSON text."""
    return _validate(Recommendation, raw, from_json=True)
