"""Database dependencies for FastAPI route handlers.

Usage:
    @router.get("/items")
    async def list_items(session: Annotated[AsyncSession, Depends(get_db_session)]):
        ...

Tests override ``get_db_session`` via ``app.dependency_overrides``.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from teamflow_tasks.infra.database import get_async_session


async def get_db_session() -> AsyncGenerator[AsyncSession]:
    """FastAPI dependency for database session.

    Yields:
        Database session that is automatically closed after request.
    """
    async with get_async_session() as session:
        yield session
