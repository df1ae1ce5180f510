"""
Pydantic schemas for the portfolio recommendation contract.

These models constrain both sides of POST /v1/recommend:
- RecommendRequest: what the caller may send (strict shape, defaults applied)
- Recommendation: what the model must generate (defaults applied, weights
  summing to 100)

The same Recommendation model is handed to Gemini as the response schema and
used again to re-validate whatever comes back.
"""

import math
from typing import Annotated, List, Literal, Optional

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StringConstraints,
    field_validator,
    model_validator,
)
from pydantic_core import PydanticCustomError

RISK_TOLERANCES = ("low", "medium", "high")
ASSET_CLASSES = ("ETF", "Stock", "Bond", "Cash", "Other")

DEFAULT_RISK_TOLERANCE = "medium"
DEFAULT_HORIZON_YEARS = 5
DEFAULT_MAX_SINGLE_WEIGHT = 40.0
DEFAULT_DISCLAIMER = "This is not financial advice. Do your own research."

WEIGHT_SUM_TARGET = 100
WEIGHT_SUM_ERROR = "weights_sum"

RiskTolerance = Literal["low", "medium", "high"]
AssetClass = Literal["ETF", "Stock", "Bond", "Cash", "Other"]

Objective = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=3, max_length=160),
]
ExcludeEntry = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=60),
]


def _reject_non_numeric_int(value):
    """Integral JSON numbers (10, 10.0) pass; strings and booleans do not."""
    if isinstance(value, (str, bytes, bool)):
        raise PydanticCustomError("int_type", "Input should be a valid integer")
    return value


HorizonYears = Annotated[int, BeforeValidator(_reject_non_numeric_int), Field(ge=1, le=50)]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 going up (2.5 -> 3, -0.5 -> 0)."""
    return math.floor(value + 0.5)


def sum_weights(weights: List[float]) -> float:
    """Left-to-right float addition of the raw weights."""
    # Not sum(): it uses compensated summation on 3.12+ and the result must not
    # depend on the interpreter version.
    total = 0.0
    for weight in weights:
        total += weight
    return total


# ============================================================================
# REQUEST MODELS
# ============================================================================

class RecommendConstraints(BaseModel):
    """
    Optional portfolio rules supplied by the caller.

    Both fields may be omitted, but an explicit null is rejected.
    """
    model_config = ConfigDict(extra="forbid")

    exclude: Optional[List[ExcludeEntry]] = Field(
        None,
        description="Tickers or themes to avoid",
        min_length=1,
        max_length=20,
        examples=[["TSLA", "crypto"]],
    )
    max_single_weight: Optional[float] = Field(
        None,
        description="Cap any single holding at a percentage of the total portfolio",
        strict=True,
        ge=1,
        le=100,
        allow_inf_nan=False,
        examples=[25],
    )

    @field_validator("exclude", "max_single_weight", mode="before")
    @classmethod
    def reject_explicit_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class RecommendRequest(BaseModel):
    """
    Inbound body for POST /v1/recommend.

    risk_tolerance and horizon_years fall back to their defaults only when the
    key is absent. A present-but-invalid value is a validation error.
    """
    model_config = ConfigDict(extra="forbid")

    objective: Objective = Field(
        ...,
        description="User's investment objective",
        examples=["grow savings for a house"],
    )
    risk_tolerance: RiskTolerance = Field(
        DEFAULT_RISK_TOLERANCE,
        description="How comfortable the investor is with market ups and downs",
    )
    horizon_years: HorizonYears = Field(
        DEFAULT_HORIZON_YEARS,
        description="Years the investor plans to stay invested before needing the money",
    )
    constraints: Optional[RecommendConstraints] = Field(
        None,
        description="Optional portfolio rules",
    )

    @field_validator("constraints", mode="before")
    @classmethod
    def reject_explicit_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class Position(BaseModel):
    """One holding within a recommendation."""
    model_config = ConfigDict(extra="forbid")

    symbol: str = Field(..., description="Ticker or identifier", examples=["VTI"])
    name: str = Field(..., description="Human-readable name", examples=["Vanguard Total Stock Market ETF"])
    asset_class: AssetClass = Field(..., description="Broad asset class of the holding")
    weight: float = Field(
        ...,
        description="Percentage of the portfolio",
        strict=True,
        ge=0,
        le=100,
        allow_inf_nan=False,
    )
    rationale: str = Field(..., description="Why this holding is included", max_length=600)


class RecommendationConstraints(BaseModel):
    """Constraints echoed back with their defaults filled in."""
    model_config = ConfigDict(json_schema_serialization_defaults_required=True)

    exclude: List[str] = Field(default_factory=list)
    max_single_weight: float = Field(
        DEFAULT_MAX_SINGLE_WEIGHT,
        strict=True,
        allow_inf_nan=False,
    )


class Recommendation(BaseModel):
    """
    Portfolio recommendation produced by the model.

    Unknown keys are dropped rather than rejected, since generated output is
    allowed to carry extra chatter. The weight-sum rule runs only once every
    field is structurally valid.
    """
    model_config = ConfigDict(json_schema_serialization_defaults_required=True)

    version: Literal["1"] = Field(..., description="Contract version")
    objective: Objective
    risk_tolerance: RiskTolerance
    horizon_years: HorizonYears
    constraints: RecommendationConstraints = Field(default_factory=RecommendationConstraints)
    portfolio: List[Position] = Field(
        ...,
        description="Holdings whose weights sum to 100",
    )
    notes: List[str] = Field(default_factory=list)
    disclaimers: List[str] = Field(default_factory=lambda: [DEFAULT_DISCLAIMER])

    @model_validator(mode="after")
    def validate_weight_sum(self):
        """
        INVARIANT: round(sum(portfolio[i].weight)) == 100.

        The sum is rounded, not the individual weights. An empty portfolio
        sums to 0 and always fails.
        """
        total = sum_weights([position.weight for position in self.portfolio])
        if round_half_up(total) != WEIGHT_SUM_TARGET:
            raise PydanticCustomError(
                WEIGHT_SUM_ERROR,
                "Weights must sum to ~100 (got {total})",
                {"total": total},
            )
        return self
