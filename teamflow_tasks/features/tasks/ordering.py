"""Backend-neutral filter and ordering terms for a task query.

Both the SQL builder and the in-memory evaluator translate these terms
instead of reading ``TaskQuery`` directly, so the two backends cannot
disagree about which rows match or in which order they come back.

Ordering rules:
    - with a cursor: ``created_at ASC, id ASC`` (the seek order)
    - otherwise the requested sort keys, ``created_at ASC`` when none
      maps to a column, then always ``id ASC`` as the tie-break
    - ``priority`` sorts by rank (high=3, medium=2, low=1, other=0)
    - ``dueDate`` puts NULLs last ascending and first descending
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from teamflow_tasks.features.tasks.query import SortKey

if TYPE_CHECKING:
    from teamflow_tasks.features.tasks.query import TaskQuery


class FilterOp(StrEnum):
    EQ = "eq"
    IN = "in"
    GTE = "gte"
    LTE = "lte"
    CONTAINS = "contains"


@dataclass(frozen=True)
class FilterTerm:
    """``<field> <op> <value>`` over a task attribute name."""

    field: str
    op: FilterOp
    value: Any


@dataclass(frozen=True)
class OrderTerm:
    """One ORDER BY entry.

    Attributes:
        field: Task attribute name.
        descending: Sort direction.
        nulls_first: NULL placement for nullable fields; None for
            columns that are never NULL.
    """

    field: str
    descending: bool = False
    nulls_first: bool | None = None


# sortOrder has no backing column and contributes no term.
SORT_FIELDS: dict[SortKey, str | None] = {
    SortKey.SORT_ORDER: None,
    SortKey.CREATED_AT: "created_at",
    SortKey.UPDATED_AT: "updated_at",
    SortKey.DUE_DATE: "due_date",
    SortKey.PRIORITY: "priority",
}

NULLABLE_SORT_FIELDS = frozenset({"due_date"})

TIE_BREAK = OrderTerm("id")
DEFAULT_ORDER = OrderTerm("created_at")
SEEK_ORDER: tuple[OrderTerm, ...] = (OrderTerm("created_at"), TIE_BREAK)


def order_terms(query: TaskQuery) -> tuple[OrderTerm, ...]:
    """Full ORDER BY for ``query``, tie-break included."""
    if query.cursor is not None:
        return SEEK_ORDER

    terms: list[OrderTerm] = []
    for order in query.sort_orders:
        field = SORT_FIELDS[order.key]
        if field is None:
            continue
        nulls_first = order.descending if field in NULLABLE_SORT_FIELDS else None
        terms.append(OrderTerm(field, order.descending, nulls_first))

    if not terms:
        terms.append(DEFAULT_ORDER)
    terms.append(TIE_BREAK)
    return tuple(terms)


def filter_terms(project_id: str, query: TaskQuery) -> tuple[FilterTerm, ...]:
    """Row predicates for ``query``; the project scope always comes first."""
    terms = [FilterTerm("project_id", FilterOp.EQ, project_id)]
    if query.statuses:
        terms.append(FilterTerm("status", FilterOp.IN, tuple(s.value for s in query.statuses)))
    if query.priorities:
        terms.append(FilterTerm("priority", FilterOp.IN, tuple(p.value for p in query.priorities)))
    if query.assignee_id is not None:
        terms.append(FilterTerm("assignee_id", FilterOp.EQ, query.assignee_id))
    if query.due_date_from is not None:
        terms.append(FilterTerm("due_date", FilterOp.GTE, query.due_date_from))
    if query.due_date_to is not None:
        terms.append(FilterTerm("due_date", FilterOp.LTE, query.due_date_to))
    if query.free_text is not None:
        terms.append(FilterTerm("title", FilterOp.CONTAINS, query.free_text))
    return tuple(terms)


__all__ = [
    "SEEK_ORDER",
    "SORT_FIELDS",
    "TIE_BREAK",
    "FilterOp",
    "FilterTerm",
    "OrderTerm",
    "filter_terms",
    "order_terms",
]
