"""
Error payloads shared by the validators and the HTTP layer.
"""

from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class ValidationIssue(BaseModel):
    """A single violated rule, located by its path inside the payload."""
    path: List[Union[str, int]] = Field(
        default_factory=list,
        description="Keys and indices leading to the offending value (empty for the root)",
        examples=[["constraints", "exclude", 0], ["horizon_years"]],
    )
    constraint: str = Field(
        ...,
        description="Machine-readable rule name",
        examples=["less_than_equal", "extra_forbidden", "weights_sum"],
    )
    message: str = Field(..., description="Human-readable explanation")
    value: Any = Field(None, description="The offending input, null when the key was missing")


class ValidationFailure(BaseModel):
    """
    Complete description of why a payload was rejected.

    kind="invariant" means every field was structurally valid and only the
    weight-sum rule failed, so regenerating may help. kind="structural" covers
    everything else.
    """
    kind: Literal["structural", "invariant"]
    issues: List[ValidationIssue] = Field(..., min_length=1)

    @property
    def is_invariant(self) -> bool:
        return self.kind == "invariant"


class InvalidBodyResponse(BaseModel):
    """Body of a 400 response."""
    error: Literal["Invalid body"] = "Invalid body"
    issues: List[ValidationIssue]


class ErrorResponse(BaseModel):
    """Body of 401, 500 and 502 responses."""
    error: str = Field(..., examples=["Failed to generate recommendation"])
    message: Optional[str] = None
    issues: Optional[List[ValidationIssue]] = None
