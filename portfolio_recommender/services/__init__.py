"""
Service layer for the Portfolio Recommender API.

- validation: pure request/response contract checks
- recommendation_service: Gemini orchestration built on top of them
"""

from .recommendation_service import generate_recommendation
from .validation import (
    ValidationResult,
    validate_recommend_request,
    validate_recommend_request_json,
    validate_recommendation,
    validate_recommendation_json,
)

__all__ = [
    "generate_recommendation",
    "ValidationResult",
    "validate_recommend_request",
    "validate_recommend_request_json",
    "validate_recommendation",
    "validate_recommendation_json",
]
