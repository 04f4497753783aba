"""Query filtering utilities for SQLAlchemy.

These filters work directly with SQLAlchemy statements without hiding
the query. Every value is bound as a parameter; nothing is interpolated
into SQL text.

Usage:
    from sqlalchemy import select
    from teamflow_tasks.core.database.filters import CollectionFilter, SearchFilter

    stmt = select(Task)
    stmt = CollectionFilter(Task.status, ["todo", "done"]).apply(stmt)
    stmt = SearchFilter(Task.title, "report").apply(stmt)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from sqlalchemy import Select, false

if TYPE_CHECKING:
    from datetime import datetime

    from sqlalchemy.orm import InstrumentedAttribute


class StatementFilter(ABC):
    """Base class for statement filters.

    All filters implement `apply()` which modifies a SQLAlchemy statement.
    """

    @abstractmethod
    def apply(self, statement: Select[Any]) -> Select[Any]:
        """Apply filter to statement.

        Args:
            statement: SQLAlchemy select statement

        Returns:
            Modified select statement
        """
        ...


class EqualityFilter(StatementFilter):
    """Exact match on one column (WHERE field = :value).

    Example:
        stmt = EqualityFilter(Task.project_id, "proj-1").apply(stmt)
    """

    def __init__(self, field: InstrumentedAttribute[Any], value: Any):
        self.field = field
        self.value = value

    def apply(self, statement: Select[Any]) -> Select[Any]:
        return statement.where(self.field == self.value)


class CollectionFilter(StatementFilter):
    """Filter by collection (WHERE ... IN).

    Example:
        stmt = CollectionFilter(Task.priority, ["high", "medium"]).apply(stmt)
        # WHERE tasks.priority IN (:priority_1_1, :priority_1_2)
    """

    def __init__(self, field: InstrumentedAttribute[Any], values: Sequence[Any]):
        """Initialize collection filter.

        Args:
            field: Field to filter
            values: Collection of values to match
        """
        self.field = field
        self.values = list(values)

    def apply(self, statement: Select[Any]) -> Select[Any]:
        if not self.values:
            # Empty collection matches nothing
            return statement.where(false())
        return statement.where(self.field.in_(self.values))


class OnBeforeAfter(StatementFilter):
    """Date/time range filtering (inclusive).

    Rows whose field is NULL never match a bound that is set.

    Example:
        stmt = OnBeforeAfter(
            Task.due_date,
            on_or_after=datetime(2026, 1, 1, tzinfo=UTC),
            on_or_before=datetime(2026, 1, 31, 23, 59, 59, 999999, tzinfo=UTC),
        ).apply(stmt)
    """

    def __init__(
        self,
        field: InstrumentedAttribute[Any],
        *,
        on_or_before: datetime | None = None,
        on_or_after: datetime | None = None,
    ):
        self.field = field
        self.on_or_before = on_or_before
        self.on_or_after = on_or_after

    def apply(self, statement: Select[Any]) -> Select[Any]:
        if self.on_or_after is not None:
            statement = statement.where(self.field >= self.on_or_after)
        if self.on_or_before is not None:
            statement = statement.where(self.field <= self.on_or_before)
        return statement


class SearchFilter(StatementFilter):
    """Case-insensitive substring match on a single text column.

    The search term is bound as a parameter with ``autoescape`` so LIKE
    wildcards typed by the user (``%``, ``_``) and the escape character
    match literally.

    Example:
        stmt = SearchFilter(Task.title, "50%").apply(stmt)
        # WHERE lower(tasks.title) LIKE '%' || lower(:title_1) || '%' ESCAPE '/'
    """

    def __init__(self, field: InstrumentedAttribute[Any], value: str):
        self.field = field
        self.value = value

    def apply(self, statement: Select[Any]) -> Select[Any]:
        if not self.value:
            return statement
        return statement.where(self.field.icontains(self.value, autoescape=True))
