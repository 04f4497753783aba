"""Logging infrastructure.

Basic usage:
    import logging

    logger = logging.getLogger(__name__)
    logger.info("Cursor rejected", extra={"code": "EXPIRED"})

    # Lazy evaluation for debug output on hot paths
    from teamflow_tasks.infra.logging import get_lazy_logger

    lazy_logger = get_lazy_logger(__name__)
    lazy_logger.debug(lambda: f"rows={len(rows)}")
"""

from teamflow_tasks.infra.logging.config import configure_logging, setup_logging
from teamflow_tasks.infra.logging.formatters import JSONFormatter
from teamflow_tasks.infra.logging.lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = [
    "JSONFormatter",
    "LazyLoggerAdapter",
    "configure_logging",
    "get_lazy_logger",
    "setup_logging",
]
