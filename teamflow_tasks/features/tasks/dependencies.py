"""FastAPI dependencies for the tasks feature."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from teamflow_tasks.core.dependencies.database import get_db_session
from teamflow_tasks.core.pagination import CursorCodec
from teamflow_tasks.core.settings import get_app_settings, get_pagination_settings
from teamflow_tasks.features.tasks.repository import get_task_repository
from teamflow_tasks.features.tasks.service import TaskListService


@lru_cache(maxsize=1)
def get_cursor_codec() -> CursorCodec:
    """Process-wide cursor codec.

    Resolving the secret here raises ``ConfigurationError`` in
    production-like environments without a usable secret, so calling it
    at startup makes a misconfigured process fail before serving.
    """
    app_settings = get_app_settings()
    pagination_settings = get_pagination_settings()
    secret = pagination_settings.resolve_cursor_secret(production_like=app_settings.is_production_like)
    return CursorCodec(secret, ttl_seconds=pagination_settings.cursor_ttl_seconds)


async def get_task_list_service(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    codec: Annotated[CursorCodec, Depends(get_cursor_codec)],
) -> TaskListService:
    """Get a task list service wired with a database session."""
    return TaskListService(session, get_task_repository(), codec)
