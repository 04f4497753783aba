"""RFC 7807 problem details schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ProblemDetails(BaseModel):
    """RFC 7807 Problem Details for HTTP APIs.

    See: https://datatracker.ietf.org/doc/html/rfc7807
    """

    type: str = Field(
        default="about:blank",
        min_length=1,
        max_length=200,
        description="URI reference identifying the problem type",
    )
    title: str = Field(min_length=1, max_length=200, description="Short, human-readable summary of the problem")
    status: int = Field(ge=100, le=599, description="HTTP status code")
    detail: str | None = Field(
        default=None,
        max_length=2000,
        description="Human-readable explanation specific to this occurrence",
    )
    instance: str | None = Field(
        default=None,
        max_length=500,
        description="URI reference identifying the specific occurrence",
    )


class ValidationIssue(BaseModel):
    """One rejected request parameter."""

    location: str = Field(default="query", description="query | path | body")
    field: str = Field(description="Wire name of the parameter, e.g. status or dueDateFrom")
    code: str = Field(description="Machine-readable code, e.g. INVALID_ENUM")
    message: str = Field(description="Fixed, user-facing correction hint")
    rejected_value: str | None = Field(default=None, alias="rejectedValue")

    model_config = ConfigDict(populate_by_name=True)


class QueryProblemDetails(ProblemDetails):
    """400 response for rejected list-query parameters.

    Example:
            {
            "type": "query-validation-error",
            "title": "Validation Error",
            "status": 400,
            "detail": "Invalid query parameters",
            "issues": [{"location": "query", "field": "status", "code": "INVALID_ENUM",
                        "message": "...", "rejectedValue": "archived"}]
        }
    """

    issues: list[ValidationIssue] = Field(default_factory=list)
