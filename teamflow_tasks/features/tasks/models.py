"""SQLAlchemy models and enums for the tasks feature."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from uuid import uuid4

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from teamflow_tasks.core.database import Base, TimestampMixin

STATUS_ALIASES = {"doing": "in_progress"}


class TaskStatus(StrEnum):
    """Workflow state of a task."""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"

    @classmethod
    def parse(cls, token: str) -> TaskStatus:
        """Parse a status token, normalizing the ``doing`` alias.

        Raises:
            ValueError: Unknown status.
        """
        return cls(STATUS_ALIASES.get(token, token))


class TaskPriority(StrEnum):
    """Task priority; compares by rank, never lexically."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return PRIORITY_RANK[self.value]


PRIORITY_RANK: dict[str, int] = {
    TaskPriority.HIGH.value: 3,
    TaskPriority.MEDIUM.value: 2,
    TaskPriority.LOW.value: 1,
}


def priority_rank(value: str | None) -> int:
    """Rank of a stored priority; unknown or missing values rank 0."""
    return PRIORITY_RANK.get(value or "", 0)


class Task(Base, TimestampMixin):
    """A task within a project.

    ``status`` and ``priority`` are stored as plain text so rows written
    by older clients with values outside the enums still load (they rank
    lowest when sorting by priority).
    """

    __tablename__ = "tasks"
    __table_args__ = (
        # Keyset pagination seeks on (created_at, id) within one project.
        Index("ix_tasks_project_created_id", "project_id", "created_at", "id"),
        Index("ix_tasks_status", "status"),
        Index("ix_tasks_priority", "priority"),
        Index("ix_tasks_assignee_id", "assignee_id"),
        Index("ix_tasks_due_date", "due_date"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=lambda: str(uuid4()))
    project_id: Mapped[str] = mapped_column(String(64), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text(), nullable=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default=TaskStatus.TODO.value)
    priority: Mapped[str] = mapped_column(String(16), nullable=False, default=TaskPriority.MEDIUM.value)
    assignee_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<Task(id={self.id!r}, project_id={self.project_id!r}, status={self.status!r})>"
