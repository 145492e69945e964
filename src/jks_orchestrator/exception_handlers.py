"""Global exception handlers for standardized error responses.

Implements RFC 7807 Problem Details for HTTP APIs.
"""

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from jks_orchestrator.core.logging import logger
from jks_orchestrator.models.errors import ProblemDetail, ValidationErrorDetail


async def http_exception_handler(
    request: Request, exc: HTTPException
) -> JSONResponse:  # noqa: ASYNC100
    """Handle HTTPException with RFC 7807 ProblemDetail response.

    Args:
        request: The FastAPI request object.
        exc: The HTTPException that was raised.

    Returns:
        JSONResponse with ProblemDetail body.
    """
    logger.error(f"HTTPException: {exc.status_code} - {exc.detail}")

    problem_detail = ProblemDetail(
        title="An error occurred",
        status=exc.status_code,
        detail=str(exc.detail),
        instance=str(request.url.path),
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=problem_detail.model_dump(exclude_none=True),
    )


async def general_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:  # noqa: ASYNC100
    """Handle unexpected exceptions with 500 Internal Server Error."""
    logger.exception(f"Unexpected error: {type(exc).__name__}")

    problem_detail = ProblemDetail(
        title="Internal Server Error",
        status=500,
        detail="An unexpected error occurred. Please try again later.",
        instance=str(request.url.path),
    )

    return JSONResponse(
        status_code=500,
        content=problem_detail.model_dump(exclude_none=True),
    )


async def validation_exception_handler(  # noqa: ASYNC100
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle malformed job requests with field-level details.

    Args:
        request: The FastAPI request object.
        exc: The RequestValidationError from Pydantic validation.

    Returns:
        JSONResponse with ProblemDetail body including validation errors.
    """
    logger.warning(f"Validation error on {request.url.path}: {len(exc.errors())} errors")

    errors = [
        ValidationErrorDetail(
            type=error["type"],
            loc=tuple(str(loc) for loc in error["loc"]),
            msg=error["msg"],
            input=error.get("input"),
            ctx=(
                {k: str(v) for k, v in error.get("ctx", {}).items()}
                if error.get("ctx")
                else None
            ),
        )
        for error in exc.errors()
    ]

    problem_detail = ProblemDetail(
        title="Validation Error",
        status=422,
        detail=f"One or more validation errors occurred ({len(errors)} errors).",
        instance=str(request.url.path),
        errors=errors,
    )

    return JSONResponse(
        status_code=422,
        content=problem_detail.model_dump(exclude_none=True),
    )
