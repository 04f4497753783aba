"""API router for the tasks feature."""

from __future__ import annotations

import re
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from teamflow_tasks.core.exceptions import QueryValidationError, ValidationCode
from teamflow_tasks.core.schemas import QueryProblemDetails
from teamflow_tasks.features.tasks.dependencies import get_task_list_service
from teamflow_tasks.features.tasks.query import TaskQueryOptions
from teamflow_tasks.features.tasks.schemas import TaskListResponse, TaskPageInfo
from teamflow_tasks.features.tasks.service import TaskListService
from teamflow_tasks.infra.logging import get_lazy_logger

router = APIRouter(prefix="/projects", tags=["tasks"])

# Lazy logger for DEBUG (zero overhead when DEBUG disabled)
lazy_logger = get_lazy_logger(__name__)

_INTEGER_RE = re.compile(r"^[+-]?\d+$")


def parse_limit(raw: str | None) -> int | None:
    """Parse the ``limit`` parameter text; range clamping happens later.

    Raises:
        QueryValidationError: ``INVALID_FORMAT`` when not an integer.
    """
    if raw is None or raw == "":
        return None
    if not _INTEGER_RE.match(raw):
        raise QueryValidationError("limit", ValidationCode.INVALID_FORMAT, raw)
    return int(raw)


def validate_assignee_id(raw: str | None) -> str | None:
    """Require ``assigneeId`` to be a UUID; the raw text is kept as the filter value.

    Raises:
        QueryValidationError: ``INVALID_FORMAT`` when not a UUID.
    """
    if not raw:
        return None
    try:
        UUID(raw)
    except ValueError:
        raise QueryValidationError("assigneeId", ValidationCode.INVALID_FORMAT, raw) from None
    return raw


@router.get(
    "/{project_id}/tasks",
    response_model=TaskListResponse,
    summary="List project tasks",
    description="""
List a project's tasks with filters, sorting and cursor pagination.

**Filters:** `status`, `priority` (comma-separated), `assigneeId`,
`dueDateFrom`/`dueDateTo` (YYYY-MM-DD, inclusive), `q` (title substring).

**Sorting:** `sort=-priority,createdAt` (`-` = descending).

**Paging:**
1. First request: `GET /projects/{id}/tasks?limit=50`
2. Next page: repeat the same filters with `cursor={page.nextCursor}`
3. Stop when `page.nextCursor` is null

`sort` cannot be combined with `cursor`; cursor pages are always ordered
by creation time.
""",
    responses={400: {"model": QueryProblemDetails, "description": "Invalid query parameters"}},
)
async def list_tasks(
    project_id: str,
    service: Annotated[TaskListService, Depends(get_task_list_service)],
    status: Annotated[str | None, Query()] = None,
    priority: Annotated[str | None, Query()] = None,
    assignee_id: Annotated[str | None, Query(alias="assigneeId")] = None,
    due_date_from: Annotated[str | None, Query(alias="dueDateFrom")] = None,
    due_date_to: Annotated[str | None, Query(alias="dueDateTo")] = None,
    q: Annotated[str | None, Query()] = None,
    sort: Annotated[str | None, Query()] = None,
    limit: Annotated[str | None, Query()] = None,
    cursor: Annotated[str | None, Query()] = None,
) -> TaskListResponse:
    """List tasks of one project.

    Args:
        project_id: Project scope
        service: Task list service
        status: Status filter
        priority: Priority filter
        assignee_id: Assignee UUID
        due_date_from: First due date, inclusive
        due_date_to: Last due date, inclusive
        q: Title search
        sort: Sort specification
        limit: Page size, clamped into [1, 200]
        cursor: Cursor from a previous page

    Returns:
        Tasks and paging information
    """
    options = TaskQueryOptions(
        status=status,
        priority=priority,
        assignee_id=validate_assignee_id(assignee_id),
        due_date_from=due_date_from,
        due_date_to=due_date_to,
        q=q,
        sort=sort,
        limit=parse_limit(limit),
        cursor=cursor,
    )
    page = await service.list_tasks(project_id, options)

    lazy_logger.debug(lambda: f"GET /projects/{project_id}/tasks -> {len(page.items)} tasks")
    return TaskListResponse(
        tasks=page.items,
        page=TaskPageInfo(next_cursor=page.next_cursor, limit=page.limit),
    )
