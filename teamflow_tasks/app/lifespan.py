"""Application lifespan management.

Startup configures logging. Shutdown disposes the database engine,
if one was created.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from teamflow_tasks.core.settings import get_app_settings
from teamflow_tasks.infra.database import close_database
from teamflow_tasks.infra.logging import setup_logging

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage startup and shutdown of application services."""
    setup_logging()
    app_settings = get_app_settings()

    logger.info(
        "Application starting",
        extra={
            "service": app_settings.service_name,
            "environment": app_settings.environment,
            "version": app_settings.version,
        },
    )
    try:
        yield
    finally:
        await close_database()
        logger.info("Application shutdown complete", extra={"service": app_settings.service_name})
