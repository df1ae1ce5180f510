"""
Portfolio Recommendation - Structured-output LLM

This module contains the prompt templates for the Gemini-based recommender.

The service layer is in:
- portfolio_recommender/services/recommendation_service.py
"""

from portfolio_recommender.agents.recommendation.prompts import (
    RECOMMENDATION_SYSTEM_PROMPT,
    build_recommendation_user_prompt,
    build_retry_prompt,
)

__all__ = [
    "RECOMMENDATION_SYSTEM_PROMPT",
    "build_recommendation_user_prompt",
    "build_retry_prompt",
]
