"""
Exception handlers mapping service errors to HTTP responses (400, 500, 502).
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from portfolio_recommender.exceptions import (
    GenerationError,
    InvalidRequestError,
    MissingCredentialsError,
)
from portfolio_recommender.schemas.errors import ErrorResponse, InvalidBodyResponse

logger = logging.getLogger(__name__)


async def invalid_request_handler(request: Request, exc: InvalidRequestError) -> JSONResponse:
    logger.warning(
        f"Invalid body on {request.method} {request.url.path}: "
        f"{len(exc.failure.issues)} issues"
    )
    body = InvalidBodyResponse(issues=exc.failure.issues)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=body.model_dump(mode="json"),
    )


async def missing_credentials_handler(request: Request, exc: MissingCredentialsError) -> JSONResponse:
    body = ErrorResponse(error=exc.message)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=body.model_dump(mode="json", exclude_none=True),
    )


async def generation_error_handler(request: Request, exc: GenerationError) -> JSONResponse:
    body = ErrorResponse(
        error="Failed to generate recommendation",
        message=exc.message,
        issues=exc.failure.issues if exc.failure is not None else None,
    )
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content=body.model_dump(mode="json", exclude_none=True),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InvalidRequestError, invalid_request_handler)
    app.add_exception_handler(MissingCredentialsError, missing_credentials_handler)
    app.add_exception_handler(GenerationError, generation_error_handler)
