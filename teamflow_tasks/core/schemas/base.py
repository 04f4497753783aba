"""Base schema classes for API responses."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes (SQLite returns them without offset)."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


class CustomBase(BaseModel):
    """Base model with common configuration for all schemas.

    Example:
            class TaskRead(CustomBase):
            id: str
            project_id: str = Field(alias="projectId")
            created_at: datetime = Field(alias="createdAt")
    """

    model_config = ConfigDict(
        # Allow creation from ORM models (SQLAlchemy)
        from_attributes=True,
        # Use enum values instead of names
        use_enum_values=True,
        # Populate models by field name (not alias)
        populate_by_name=True,
        extra="ignore",
    )
