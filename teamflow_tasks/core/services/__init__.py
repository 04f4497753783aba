"""Service layer base classes."""

from teamflow_tasks.core.services.base import BaseService

__all__ = ["BaseService"]
