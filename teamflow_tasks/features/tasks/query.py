"""Task list query normalization.

Raw request parameters arrive as one ``TaskQueryOptions`` value and are
turned into an immutable, validated ``TaskQuery`` by a single call to
``build_task_query``. Every rejection is a ``QueryValidationError``
carrying the offending field, a ``ValidationCode`` and the rejected
token, so callers never have to inspect messages.

Usage:
    options = TaskQueryOptions(status="todo,doing", sort="-priority", limit=50)
    query = build_task_query(options, project_id="proj-1", codec=codec)
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import UTC, date, datetime, time
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from teamflow_tasks.core.exceptions import QueryValidationError, ValidationCode
from teamflow_tasks.core.pagination.fingerprint import compute_fingerprint
from teamflow_tasks.features.tasks.models import TaskPriority, TaskStatus
from teamflow_tasks.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from teamflow_tasks.core.pagination.cursor import CursorCodec, CursorPosition

DEFAULT_LIMIT = 200
MAX_LIMIT = 200

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

_lazy = get_lazy_logger(__name__)


class SortKey(StrEnum):
    """Sortable task attributes accepted in the ``sort`` parameter."""

    SORT_ORDER = "sortOrder"
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"
    DUE_DATE = "dueDate"
    PRIORITY = "priority"


class SortDirection(StrEnum):
    ASC = "ASC"
    DESC = "DESC"


@dataclass(frozen=True)
class SortOrder:
    """One ``(key, direction)`` pair of a sort specification.

    Unknown keys are rejected here, so no unvalidated key ever reaches a
    backend.
    """

    key: SortKey
    direction: SortDirection = SortDirection.ASC

    def __post_init__(self) -> None:
        try:
            key = SortKey(self.key)
        except ValueError:
            raise QueryValidationError("sort", ValidationCode.INVALID_ENUM, str(self.key)) from None
        object.__setattr__(self, "key", key)
        object.__setattr__(self, "direction", SortDirection(self.direction))

    @property
    def descending(self) -> bool:
        return self.direction is SortDirection.DESC


class TaskQueryOptions(BaseModel):
    """Raw list parameters exactly as the client sent them.

    Every field is optional; absent and empty values mean "no filter".
    Field aliases follow the wire names (``assigneeId``, ``dueDateFrom``...).
    """

    status: str | None = Field(default=None, description="Comma-separated statuses")
    priority: str | None = Field(default=None, description="Comma-separated priorities")
    assignee_id: str | None = Field(default=None, alias="assigneeId")
    due_date_from: str | None = Field(default=None, alias="dueDateFrom", description="YYYY-MM-DD")
    due_date_to: str | None = Field(default=None, alias="dueDateTo", description="YYYY-MM-DD")
    q: str | None = Field(default=None, description="Case-insensitive title substring")
    sort: str | None = Field(default=None, description="e.g. -priority,createdAt")
    limit: int | None = Field(default=None, description="Page size, clamped into [1, 200]")
    cursor: str | None = Field(default=None, description="Opaque cursor from a previous page")

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")


@dataclass(frozen=True)
class TaskQuery:
    """A validated task list query.

    ``due_date_from``/``due_date_to`` are the inclusive UTC bounds of
    whole days. ``sort_orders`` and ``cursor`` are never both set; while a
    cursor is present the order is fixed to ``(createdAt ASC, id ASC)``.
    """

    statuses: tuple[TaskStatus, ...] = ()
    priorities: tuple[TaskPriority, ...] = ()
    assignee_id: str | None = None
    due_date_from: datetime | None = None
    due_date_to: datetime | None = None
    free_text: str | None = None
    sort_orders: tuple[SortOrder, ...] = ()
    limit: int = DEFAULT_LIMIT
    cursor: CursorPosition | None = None

    def validate(self) -> None:
        """Check the cross-field invariants.

        Raises:
            QueryValidationError: Limit out of range, inverted due-date
                window, or a cursor combined with explicit sort orders.
        """
        if not 1 <= self.limit <= MAX_LIMIT:
            raise QueryValidationError("limit", ValidationCode.CONSTRAINT_VIOLATION, str(self.limit))
        if self.due_date_from and self.due_date_to and self.due_date_from > self.due_date_to:
            raise QueryValidationError(
                "dueDateFrom",
                ValidationCode.CONSTRAINT_VIOLATION,
                self.due_date_from.date().isoformat(),
            )
        if self.cursor is not None and self.sort_orders:
            raise QueryValidationError("sort", ValidationCode.INCOMPATIBLE_WITH_CURSOR)

    def filter_dimensions(self) -> dict[str, Any]:
        """Semantic filters only: sort, limit and cursor are excluded."""
        return {
            "status": [status.value for status in self.statuses],
            "priority": [priority.value for priority in self.priorities],
            "assigneeId": self.assignee_id,
            "dueDateFrom": self.due_date_from.date() if self.due_date_from else None,
            "dueDateTo": self.due_date_to.date() if self.due_date_to else None,
            "q": self.free_text,
        }

    def fingerprint(self, project_id: str) -> str:
        return compute_fingerprint(project_id, self.filter_dimensions())


def _split_tokens(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [token for token in (part.strip() for part in raw.split(",")) if token]


def _dedupe(values: Iterable[Any]) -> tuple[Any, ...]:
    return tuple(dict.fromkeys(values))


def parse_statuses(raw: str | None) -> tuple[TaskStatus, ...]:
    """Parse ``todo,doing,...``; ``doing`` becomes ``in_progress``."""
    statuses = []
    for token in _split_tokens(raw):
        try:
            statuses.append(TaskStatus.parse(token))
        except ValueError:
            raise QueryValidationError("status", ValidationCode.INVALID_ENUM, token) from None
    return _dedupe(statuses)


def parse_priorities(raw: str | None) -> tuple[TaskPriority, ...]:
    priorities = []
    for token in _split_tokens(raw):
        try:
            priorities.append(TaskPriority(token))
        except ValueError:
            raise QueryValidationError("priority", ValidationCode.INVALID_ENUM, token) from None
    return _dedupe(priorities)


def parse_due_date(raw: str | None, field: str, *, end_of_day: bool = False) -> datetime | None:
    """Widen a ``YYYY-MM-DD`` date to the first or last microsecond of that UTC day.

    Args:
        raw: Date text; empty means no bound.
        field: Wire name reported on rejection.
        end_of_day: Return 23:59:59.999999 instead of midnight.

    Raises:
        QueryValidationError: ``INVALID_FORMAT`` with the raw text.
    """
    if not raw:
        return None
    if not _DATE_RE.match(raw):
        raise QueryValidationError(field, ValidationCode.INVALID_FORMAT, raw)
    try:
        day = date.fromisoformat(raw)
    except ValueError:
        raise QueryValidationError(field, ValidationCode.INVALID_FORMAT, raw) from None
    return datetime.combine(day, time.max if end_of_day else time.min, tzinfo=UTC)


def parse_sort(raw: str | None) -> tuple[SortOrder, ...]:
    """Parse ``-priority,createdAt``; a leading ``-`` means descending.

    The rejected value of an unknown key is the bare key, without ``-``.
    """
    orders = []
    for token in _split_tokens(raw):
        if token.startswith("-"):
            orders.append(SortOrder(token[1:], SortDirection.DESC))
        else:
            orders.append(SortOrder(token, SortDirection.ASC))
    return tuple(orders)


def normalize_limit(value: int | None) -> int:
    """Clamp a requested page size; out-of-range values fall back to the maximum."""
    if value is None or value < 1 or value > MAX_LIMIT:
        return DEFAULT_LIMIT
    return value


def normalize_free_text(raw: str | None) -> str | None:
    if raw is None:
        return None
    return raw.strip() or None


def build_task_query(
    options: TaskQueryOptions,
    *,
    project_id: str,
    codec: CursorCodec | None = None,
) -> TaskQuery:
    """Validate raw options into a ``TaskQuery``.

    A cursor together with an explicit sort is rejected before anything
    else is looked at, in particular before the cursor is decoded. A
    lone cursor is verified against the fingerprint of this request's
    filters and project.

    Args:
        options: Raw request parameters.
        project_id: Project the request is scoped to.
        codec: Cursor codec; required only when ``options.cursor`` is set.

    Returns:
        Validated, immutable query.

    Raises:
        QueryValidationError: Any rejected parameter (including the
            ``CursorError`` subclasses).
    """
    cursor_text = options.cursor or None
    if cursor_text and options.sort:
        raise QueryValidationError("sort", ValidationCode.INCOMPATIBLE_WITH_CURSOR, options.sort)

    query = TaskQuery(
        statuses=parse_statuses(options.status),
        priorities=parse_priorities(options.priority),
        assignee_id=options.assignee_id or None,
        due_date_from=parse_due_date(options.due_date_from, "dueDateFrom"),
        due_date_to=parse_due_date(options.due_date_to, "dueDateTo", end_of_day=True),
        free_text=normalize_free_text(options.q),
        sort_orders=parse_sort(options.sort),
        limit=normalize_limit(options.limit),
    )

    if query.due_date_from and query.due_date_to and query.due_date_from > query.due_date_to:
        raise QueryValidationError("dueDateFrom", ValidationCode.CONSTRAINT_VIOLATION, options.due_date_from)

    if cursor_text:
        if codec is None:
            msg = "a cursor codec is required to accept cursors"
            raise ValueError(msg)
        position = codec.verify(cursor_text, project_id=project_id, qhash=query.fingerprint(project_id))
        query = replace(query, cursor=position)

    query.validate()
    _lazy.debug(lambda: f"query.build: project={project_id} {query}")
    return query


__all__ = [
    "DEFAULT_LIMIT",
    "MAX_LIMIT",
    "SortDirection",
    "SortKey",
    "SortOrder",
    "TaskQuery",
    "TaskQueryOptions",
    "build_task_query",
    "normalize_free_text",
    "normalize_limit",
    "parse_due_date",
    "parse_priorities",
    "parse_sort",
    "parse_statuses",
]
