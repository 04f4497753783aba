"""In-memory backend for task listing.

Evaluates the same filter and order terms as the SQL builder over plain
Python objects: same NULL placement, same priority rank, same ``id``
tie-break, and the same ``(created_at, id)`` seek when a cursor is
present. Used by tests and by deployments without a database.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from datetime import UTC, datetime
from functools import cmp_to_key
from typing import TYPE_CHECKING, Any

from teamflow_tasks.features.tasks.models import Task, priority_rank
from teamflow_tasks.features.tasks.ordering import (
    FilterOp,
    FilterTerm,
    OrderTerm,
    filter_terms,
    order_terms,
)
from teamflow_tasks.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from teamflow_tasks.core.pagination.cursor import CursorPosition
    from teamflow_tasks.features.tasks.query import TaskQuery

_lazy = get_lazy_logger(__name__)


def _normalize(value: Any) -> Any:
    # Stored datetimes may be naive UTC (SQLite) or aware.
    if isinstance(value, datetime):
        return value.replace(tzinfo=UTC) if value.tzinfo is None else value.astimezone(UTC)
    return value


def _field_value(row: Any, field: str) -> Any:
    value = getattr(row, field)
    if field == "priority":
        return priority_rank(value)
    return _normalize(value)


def _matches(row: Any, term: FilterTerm) -> bool:
    value = _normalize(getattr(row, term.field))
    match term.op:
        case FilterOp.EQ:
            return value == term.value
        case FilterOp.IN:
            return value in term.value
        case FilterOp.GTE:
            return value is not None and value >= term.value
        case FilterOp.LTE:
            return value is not None and value <= term.value
        case FilterOp.CONTAINS:
            return value is not None and term.value.lower() in value.lower()
    msg = f"unsupported filter operator: {term.op}"
    raise ValueError(msg)


def _compare_term(a: Any, b: Any, term: OrderTerm) -> int:
    left = _field_value(a, term.field)
    right = _field_value(b, term.field)
    if left is None or right is None:
        if left is None and right is None:
            return 0
        # NULL placement is absolute, not flipped by the direction.
        null_before = -1 if term.nulls_first else 1
        return null_before if left is None else -null_before
    result = (left > right) - (left < right)
    return -result if term.descending else result


def build_comparator(terms: Sequence[OrderTerm]) -> Callable[[Any, Any], int]:
    """Multi-key ``cmp`` function applying ``terms`` in precedence order."""

    def compare(a: Any, b: Any) -> int:
        for term in terms:
            result = _compare_term(a, b, term)
            if result:
                return result
        return 0

    return compare


def is_after(row: Any, position: CursorPosition) -> bool:
    """Whether ``row`` sorts strictly after ``position`` in ``(created_at, id)`` order."""
    created_at = _normalize(row.created_at)
    cursor_created_at = _normalize(position.created_at)
    return created_at > cursor_created_at or (created_at == cursor_created_at and row.id > position.id)


def evaluate(rows: Iterable[Any], project_id: str, query: TaskQuery) -> list[Any]:
    """Filter, seek, order and over-fetch ``rows`` exactly as the SQL statement would.

    Returns:
        Up to ``query.limit + 1`` rows.
    """
    terms = filter_terms(project_id, query)
    matched = [row for row in rows if all(_matches(row, term) for term in terms)]
    if query.cursor is not None:
        matched = [row for row in matched if is_after(row, query.cursor)]
    matched.sort(key=cmp_to_key(build_comparator(order_terms(query))))
    return matched[: query.limit + 1]


class InMemoryTaskRepository:
    """Task store backed by a dict, interchangeable with ``TaskRepository``.

    Example:
        repo = InMemoryTaskRepository([Task(id="task-001", ...)])
        rows = await repo.find_by_project(None, "proj-1", query)
    """

    def __init__(self, tasks: Iterable[Task] = ()) -> None:
        self._tasks: dict[str, Task] = {task.id: task for task in tasks}

    def add(self, task: Task) -> None:
        self._tasks[task.id] = task

    def __len__(self) -> int:
        return len(self._tasks)

    async def find_by_project(self, session: Any, project_id: str, query: TaskQuery) -> list[Task]:
        """Same contract as ``TaskRepository.find_by_project``; ``session`` is ignored."""
        items = evaluate(self._tasks.values(), project_id, query)
        _lazy.debug(
            lambda: f"memory.find_by_project: Task(project={project_id}, limit={query.limit}) -> {len(items)} items"
        )
        return items


__all__ = ["InMemoryTaskRepository", "build_comparator", "evaluate", "is_after"]
