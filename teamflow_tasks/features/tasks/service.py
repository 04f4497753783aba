"""Service layer for listing tasks a page at a time."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

from teamflow_tasks.core.exceptions import CursorError
from teamflow_tasks.core.pagination import CursorPage, paginate
from teamflow_tasks.core.services.base import BaseService
from teamflow_tasks.features.tasks.query import TaskQuery, TaskQueryOptions, build_task_query
from teamflow_tasks.features.tasks.schemas import TaskRead

if TYPE_CHECKING:
    from collections.abc import Sequence

    from teamflow_tasks.core.pagination import CursorCodec
    from teamflow_tasks.features.tasks.models import Task


class TaskFinder(Protocol):
    """Backend contract shared by the SQL and in-memory repositories."""

    async def find_by_project(self, session: Any, project_id: str, query: TaskQuery) -> Sequence[Task]: ...


class TaskListService(BaseService):
    """Normalizes list parameters, fetches one page and mints the next cursor."""

    def __init__(self, session: Any, repository: TaskFinder, codec: CursorCodec) -> None:
        super().__init__()
        self._session = session
        self._repository = repository
        self._codec = codec

    async def list_tasks(self, project_id: str, options: TaskQueryOptions) -> CursorPage[TaskRead]:
        """Return one page of a project's tasks.

        Args:
            project_id: Project scope
            options: Raw list parameters

        Returns:
            Page of tasks with the cursor for the following page, if any

        Raises:
            QueryValidationError: Rejected parameter or cursor
        """
        try:
            query = build_task_query(options, project_id=project_id, codec=self._codec)
        except CursorError as exc:
            # INFO level - client error, never log the cursor itself
            self.logger.info(
                "Cursor rejected",
                extra={
                    "project_id": project_id,
                    "code": str(exc.code),
                    "operation": "service.list_tasks",
                },
            )
            raise

        rows = await self._repository.find_by_project(self._session, project_id, query)
        qhash = query.fingerprint(project_id)

        def mint(task: Task) -> str:
            return self._codec.mint(created_at=task.created_at, row_id=task.id, project_id=project_id, qhash=qhash)

        page = paginate(rows, limit=query.limit, mint=mint)

        # DEBUG level - routine list operation
        self._lazy.debug(
            lambda: f"service.list_tasks(project={project_id}, limit={query.limit}) -> "
            f"{len(page.items)} items, has_more={page.has_more}"
        )
        return CursorPage[TaskRead](
            items=[TaskRead.model_validate(task) for task in page.items],
            next_cursor=page.next_cursor,
            has_more=page.has_more,
            limit=page.limit,
        )
