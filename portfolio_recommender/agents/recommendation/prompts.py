"""
Portfolio Recommendation Prompt Templates

Contains the system instruction and user prompt builder for the
recommendation service.

Architecture:
- Pattern: Structured-output LLM (single Gemini call, JSON response schema)
- Model: Gemini 2.5 Flash
- Output: JSON matching the Recommendation schema, re-validated by the
  service before it is returned
"""

import json

from portfolio_recommender.schemas.portfolio import RecommendRequest

RECOMMENDATION_SYSTEM_PROMPT = (
    "You are a portfolio recommender. Output a diversified portfolio whose "
    "weights sum to 100. Prefer liquid, low-fee ETFs unless the user insists "
    "on single stocks."
)

# Appended to the prompt when a previous attempt missed the weight-sum rule
WEIGHT_SUM_REMINDER = (
    "Your previous answer was rejected because the portfolio weights summed "
    "to {total}. Adjust the weights so they add up to exactly 100."
)


def build_recommendation_user_prompt(request: RecommendRequest) -> str:
    """
    Build the user prompt from a validated request.

    Constraints are serialized as compact JSON of only the fields the caller
    supplied; "{}" when there are none.

    Example:
        Objective: grow savings for a house
        Risk: high
        Horizon (years): 10
        Constraints: {}
    """
    if request.constraints is not None:
        constraints = request.constraints.model_dump(exclude_none=True)
    else:
        constraints = {}

    return (
        f"Objective: {request.objective}\n"
        f"Risk: {request.risk_tolerance}\n"
        f"Horizon (years): {request.horizon_years}\n"
        f"Constraints: {json.dumps(constraints, separators=(',', ':'), ensure_ascii=False)}"
    )


def build_retry_prompt(request: RecommendRequest, previous_total: float) -> str:
    """User prompt for a regeneration after a weight-sum failure."""
    reminder = WEIGHT_SUM_REMINDER.format(total=round(previous_total, 2))
    return f"{build_recommendation_user_prompt(request)}\n\n{reminder}"
