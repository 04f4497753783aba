"""Shared API schemas."""

from teamflow_tasks.core.schemas.base import CustomBase
from teamflow_tasks.core.schemas.problem_details import (
    ProblemDetails,
    QueryProblemDetails,
    ValidationIssue,
)

__all__ = ["CustomBase", "ProblemDetails", "QueryProblemDetails", "ValidationIssue"]
