"""Test helpers shared across the suite."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

from teamflow_tasks.features.tasks.models import Task

PROJECT_ID = "proj-1"
OTHER_PROJECT_ID = "proj-2"
BASE_TIME = datetime(2026, 1, 15, 10, 30, tzinfo=UTC)


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


def make_task(
    task_id: str,
    *,
    project_id: str = PROJECT_ID,
    created_offset_us: int = 0,
    **overrides: Any,
) -> Task:
    """Build a detached Task with deterministic timestamps.

    ``created_offset_us`` is added to ``BASE_TIME`` in microseconds.
    """
    created_at = BASE_TIME + timedelta(microseconds=created_offset_us)
    fields: dict[str, Any] = {
        "id": task_id,
        "project_id": project_id,
        "title": f"Task {task_id}",
        "description": None,
        "status": "todo",
        "priority": "medium",
        "assignee_id": None,
        "due_date": None,
        "created_at": created_at,
        "updated_at": created_at,
    }
    fields.update(overrides)
    return Task(**fields)


def sequential_tasks(count: int, *, project_id: str = PROJECT_ID) -> list[Task]:
    """``task-001..task-NNN`` with strictly increasing microsecond ``created_at``."""
    return [make_task(f"task-{n:03d}", project_id=project_id, created_offset_us=n) for n in range(1, count + 1)]
