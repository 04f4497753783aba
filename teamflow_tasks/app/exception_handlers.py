"""Global exception handlers for FastAPI application."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from teamflow_tasks.core.exceptions import AppException, QueryValidationError, ValidationCode
from teamflow_tasks.core.schemas import ProblemDetails, QueryProblemDetails, ValidationIssue

logger = logging.getLogger(__name__)

GENERIC_QUERY_MESSAGE = "Invalid query parameter. Check the value and try again."

# Fixed, user-facing hints per (field, code); clients may display them verbatim.
ISSUE_MESSAGES: dict[tuple[str, ValidationCode], str] = {
    ("status", ValidationCode.INVALID_ENUM): (
        "status must be a comma-separated list of 'todo', 'doing', 'in_progress', 'done' "
        "(e.g. status=todo,in_progress)."
    ),
    ("priority", ValidationCode.INVALID_ENUM): (
        "priority must be a comma-separated list of 'high', 'medium', 'low' (e.g. priority=high,medium)."
    ),
    ("dueDateFrom", ValidationCode.INVALID_FORMAT): "dueDateFrom must be YYYY-MM-DD (e.g. dueDateFrom=2026-01-10).",
    ("dueDateTo", ValidationCode.INVALID_FORMAT): "dueDateTo must be YYYY-MM-DD (e.g. dueDateTo=2026-01-10).",
    ("dueDateFrom", ValidationCode.CONSTRAINT_VIOLATION): (
        "dueDateFrom must not be after dueDateTo (e.g. dueDateFrom=2026-01-01&dueDateTo=2026-01-10)."
    ),
    ("sort", ValidationCode.INVALID_ENUM): (
        "sort accepts only 'sortOrder', 'createdAt', 'updatedAt', 'dueDate', 'priority' "
        "(e.g. sort=-priority,createdAt)."
    ),
    ("sort", ValidationCode.INCOMPATIBLE_WITH_CURSOR): "sort cannot be combined with cursor.",
    ("limit", ValidationCode.INVALID_FORMAT): "limit must be an integer (e.g. limit=50).",
    ("limit", ValidationCode.CONSTRAINT_VIOLATION): "limit must be an integer between 1 and 200.",
    ("assigneeId", ValidationCode.INVALID_FORMAT): "assigneeId must be a UUID.",
    ("cursor", ValidationCode.INVALID_FORMAT): "cursor is malformed.",
    ("cursor", ValidationCode.INVALID_SIGNATURE): "cursor signature is invalid.",
    ("cursor", ValidationCode.EXPIRED): "cursor has expired. Restart from the first page.",
    ("cursor", ValidationCode.QUERY_MISMATCH): (
        "cursor does not match the current filters. Restart from the first page."
    ),
}


def to_validation_issue(exc: QueryValidationError) -> ValidationIssue:
    """Map a query validation error to its wire issue."""
    return ValidationIssue(
        location="query",
        field=exc.field,
        code=str(exc.code),
        message=ISSUE_MESSAGES.get((exc.field, exc.code), GENERIC_QUERY_MESSAGE),
        rejectedValue=exc.rejected_value,
    )


def _create_problem_detail(
    status_code: int,
    detail: str,
    type_: str = "about:blank",
    title: str | None = None,
    instance: str | None = None,
    extra: dict[str, Any] | None = None,
) -> dict[str, Any]:
    problem = ProblemDetails(
        type=type_,
        title=title or "Error",
        status=status_code,
        detail=detail,
        instance=instance,
    )
    response_data = problem.model_dump(exclude_none=True)
    if extra:
        response_data.update(extra)
    return response_data


async def query_validation_exception_handler(request: Request, exc: QueryValidationError) -> JSONResponse:
    """Render a rejected list parameter as a 400 with one issue.

    Args:
        request: The FastAPI request object.
        exc: The rejection raised while building the query.

    Returns:
        JSONResponse with RFC 7807 fields plus ``issues``.
    """
    issue = to_validation_issue(exc)
    logger.info(
        "Query parameter rejected",
        extra={
            "path": request.url.path,
            "method": request.method,
            "field": issue.field,
            "code": issue.code,
        },
    )
    problem = QueryProblemDetails(
        type=exc.type,
        title=exc.title,
        status=status.HTTP_400_BAD_REQUEST,
        detail="Invalid query parameters",
        instance=request.url.path,
        issues=[issue],
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=problem.model_dump(by_alias=True, exclude_none=True),
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handle custom application exceptions as RFC 7807 responses."""
    logger.warning(
        "Application exception occurred",
        extra={
            "path": request.url.path,
            "method": request.method,
            "exception_type": exc.type,
            "status_code": exc.status_code,
            "detail": exc.detail,
        },
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=_create_problem_detail(
            status_code=exc.status_code,
            detail=exc.detail,
            type_=exc.type,
            title=exc.title,
            instance=request.url.path,
            extra=exc.extra,
        ),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions (database failures included) as opaque 500s."""
    logger.exception(
        "Unhandled exception occurred",
        extra={
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__,
        },
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_create_problem_detail(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
            type_="internal-server-error",
            title="Internal Server Error",
            instance=request.url.path,
        ),
    )


def configure_exception_handlers(app: FastAPI) -> None:
    """Register the exception handlers on ``app``."""
    app.add_exception_handler(QueryValidationError, query_validation_exception_handler)
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
    logger.info("Exception handlers configured")
