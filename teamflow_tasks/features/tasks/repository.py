"""SQL backend for task listing.

``build_task_statement`` compiles a project id and a validated
``TaskQuery`` into one SQLAlchemy ``Select``. Every filter value is a
bound parameter; sort keys only ever select from a fixed column map.
The statement always asks for ``limit + 1`` rows so the paginator can
tell whether another page exists without a count query.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import Select, and_, case, literal_column, or_, select
from sqlalchemy.dialects import postgresql

from teamflow_tasks.core.database import (
    CollectionFilter,
    EqualityFilter,
    OnBeforeAfter,
    SearchFilter,
    StatementFilter,
)
from teamflow_tasks.features.tasks.models import PRIORITY_RANK, Task
from teamflow_tasks.features.tasks.ordering import (
    FilterOp,
    FilterTerm,
    OrderTerm,
    filter_terms,
    order_terms,
)
from teamflow_tasks.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.sql.elements import ColumnElement

    from teamflow_tasks.core.pagination.cursor import CursorPosition
    from teamflow_tasks.features.tasks.query import TaskQuery

_lazy = get_lazy_logger(__name__)


def priority_rank_expression() -> ColumnElement[int]:
    """``CASE priority WHEN 'high' THEN 3 ... ELSE 0 END``."""
    return case(
        *((Task.priority == value, literal_column(str(rank))) for value, rank in PRIORITY_RANK.items()),
        else_=literal_column("0"),
    )


def _order_column(field: str) -> ColumnElement[Any]:
    if field == "priority":
        return priority_rank_expression()
    return getattr(Task, field)


def _order_clause(term: OrderTerm) -> ColumnElement[Any]:
    column = _order_column(term.field)
    clause = column.desc() if term.descending else column.asc()
    if term.nulls_first is True:
        clause = clause.nulls_first()
    elif term.nulls_first is False:
        clause = clause.nulls_last()
    return clause


def _statement_filter(term: FilterTerm) -> StatementFilter:
    column = getattr(Task, term.field)
    match term.op:
        case FilterOp.EQ:
            return EqualityFilter(column, term.value)
        case FilterOp.IN:
            return CollectionFilter(column, term.value)
        case FilterOp.GTE:
            return OnBeforeAfter(column, on_or_after=term.value)
        case FilterOp.LTE:
            return OnBeforeAfter(column, on_or_before=term.value)
        case FilterOp.CONTAINS:
            return SearchFilter(column, term.value)
    msg = f"unsupported filter operator: {term.op}"
    raise ValueError(msg)


def seek_predicate(position: CursorPosition) -> ColumnElement[bool]:
    """Rows strictly after ``position`` in ``(created_at, id)`` order."""
    return or_(
        Task.created_at > position.created_at,
        and_(Task.created_at == position.created_at, Task.id > position.id),
    )


def build_task_statement(project_id: str, query: TaskQuery) -> Select[tuple[Task]]:
    """Compile a task list query into a parameterized ``SELECT``.

    Args:
        project_id: Mandatory project scope.
        query: Validated query.

    Returns:
        Statement selecting up to ``query.limit + 1`` tasks.
    """
    stmt = select(Task)
    for term in filter_terms(project_id, query):
        stmt = _statement_filter(term).apply(stmt)

    if query.cursor is not None:
        stmt = stmt.where(seek_predicate(query.cursor))

    stmt = stmt.order_by(*(_order_clause(term) for term in order_terms(query)))
    return stmt.limit(query.limit + 1)


def render_statement(stmt: Select[Any]) -> str:
    """Compile a statement to PostgreSQL text with placeholders, for logs and tests."""
    return str(stmt.compile(dialect=postgresql.dialect()))


class TaskRepository:
    """Reads task pages from the database."""

    def __init__(self) -> None:
        self._lazy = get_lazy_logger("repository.Task")

    async def find_by_project(
        self,
        session: AsyncSession,
        project_id: str,
        query: TaskQuery,
    ) -> Sequence[Task]:
        """Fetch up to ``query.limit + 1`` tasks of one project in query order.

        Args:
            session: Database session
            project_id: Project scope
            query: Validated query

        Returns:
            Matching tasks, ordered, including the probe row when present
        """
        stmt = build_task_statement(project_id, query)
        result = await session.execute(stmt)
        items = result.scalars().all()

        self._lazy.debug(
            lambda: f"db.find_by_project: Task(project={project_id}, limit={query.limit}, "
            f"seek={query.cursor is not None}) -> {len(items)} items"
        )
        return items


_task_repository: TaskRepository | None = None


def get_task_repository() -> TaskRepository:
    """Get the shared TaskRepository instance."""
    global _task_repository
    if _task_repository is None:
        _task_repository = TaskRepository()
    return _task_repository


__all__ = [
    "TaskRepository",
    "build_task_statement",
    "get_task_repository",
    "priority_rank_expression",
    "render_statement",
    "seek_predicate",
]
