"""Database models base and statement filters."""

from teamflow_tasks.core.database.base import Base, TimestampMixin
from teamflow_tasks.core.database.filters import (
    CollectionFilter,
    EqualityFilter,
    OnBeforeAfter,
    SearchFilter,
    StatementFilter,
)

__all__ = [
    "Base",
    "CollectionFilter",
    "EqualityFilter",
    "OnBeforeAfter",
    "SearchFilter",
    "StatementFilter",
    "TimestampMixin",
]
