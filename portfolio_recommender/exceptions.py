"""
Service errors raised by the recommendation flow.

Each carries a message and a machine-readable code; exception_handlers.py
turns them into HTTP responses.
"""

from typing import Optional

from portfolio_recommender.schemas.errors import ValidationFailure


class RecommenderError(Exception):
    def __init__(self, message: str, code: str = "INTERNAL_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class MissingCredentialsError(RecommenderError):
    def __init__(self, message: str = "Missing LLM credentials"):
        super().__init__(message, code="LLM_CONFIG_ERROR")


class GenerationError(RecommenderError):
    """The provider call failed or its output did not pass validation."""

    def __init__(self, message: str, failure: Optional[ValidationFailure] = None):
        self.failure = failure
        super().__init__(message, code="LLM_PROVIDER_ERROR")


class InvalidRequestError(RecommenderError):
    """The request body failed validation; failure lists every issue."""

    def __init__(self, failure: ValidationFailure):
        self.failure = failure
        super().__init__("Invalid body", code="VALIDATION_ERROR")
