"""Pydantic schemas for the tasks feature."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from teamflow_tasks.core.schemas.base import CustomBase, as_utc


class TaskRead(CustomBase):
    """Task as returned by the list endpoint (camelCase on the wire)."""

    id: str
    project_id: str = Field(alias="projectId")
    title: str
    description: str | None = None
    status: str
    priority: str
    assignee_id: str | None = Field(default=None, alias="assigneeId")
    due_date: datetime | None = Field(default=None, alias="dueDate")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @field_validator("due_date", "created_at", "updated_at", mode="after")
    @classmethod
    def _ensure_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)


class TaskPageInfo(BaseModel):
    next_cursor: str | None = Field(default=None, alias="nextCursor")
    limit: int

    model_config = ConfigDict(populate_by_name=True)


class TaskListResponse(BaseModel):
    """``{"tasks": [...], "page": {"nextCursor": ..., "limit": ...}}``."""

    tasks: list[TaskRead]
    page: TaskPageInfo
