"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from teamflow_tasks.app.exception_handlers import configure_exception_handlers
from teamflow_tasks.app.lifespan import lifespan
from teamflow_tasks.core.settings import get_app_settings
from teamflow_tasks.features.tasks.dependencies import get_cursor_codec
from teamflow_tasks.features.tasks.router import router as tasks_router


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    The cursor codec is built here so a production-like process without
    a usable cursor secret raises ``ConfigurationError`` before serving.

    Returns:
        Configured FastAPI application instance.
    """
    app_settings = get_app_settings()
    get_cursor_codec()

    app = FastAPI(
        title=app_settings.title,
        version=app_settings.version,
        debug=app_settings.debug,
        lifespan=lifespan,
    )

    # Exception handlers before routers
    configure_exception_handlers(app)
    app.include_router(tasks_router, prefix=app_settings.api_prefix)

    return app
