"""Database infrastructure."""

from teamflow_tasks.infra.database.session import (
    close_database,
    get_async_session,
    get_engine,
    get_session_factory,
)

__all__ = ["close_database", "get_async_session", "get_engine", "get_session_factory"]
