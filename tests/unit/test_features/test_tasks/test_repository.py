"""Unit tests for the SQL statement builder and repository."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from sqlalchemy import select

from teamflow_tasks.core.database import CollectionFilter
from teamflow_tasks.core.pagination.cursor import CursorPosition
from teamflow_tasks.features.tasks.models import Task
from teamflow_tasks.features.tasks.query import TaskQuery, TaskQueryOptions, build_task_query
from teamflow_tasks.features.tasks.repository import TaskRepository, build_task_statement, render_statement
from tests.utils import BASE_TIME, OTHER_PROJECT_ID, PROJECT_ID, make_task, sequential_tasks


def _sql(**options) -> str:
    query = build_task_query(TaskQueryOptions(**options), project_id=PROJECT_ID)
    return render_statement(build_task_statement(PROJECT_ID, query))


def _seek_query(limit: int = 2) -> TaskQuery:
    position = CursorPosition(created_at=BASE_TIME, id="task-002", project_id=PROJECT_ID, qhash="h", issued_at=0)
    return TaskQuery(limit=limit, cursor=position)


@pytest.mark.unit
class TestStatementShape:
    def test_project_scope_always_present(self):
        assert "WHERE tasks.project_id = " in _sql()

    def test_default_order_and_tie_break(self):
        assert "ORDER BY tasks.created_at ASC, tasks.id ASC" in _sql()

    def test_limit_plus_one(self):
        query = build_task_query(TaskQueryOptions(limit=25), project_id=PROJECT_ID)
        compiled = build_task_statement(PROJECT_ID, query).compile()

        assert 26 in compiled.params.values()

    def test_filters_are_bound(self):
        sql = _sql(status="todo,done", priority="high", assignee_id="u-1", due_date_from="2026-01-01")

        assert "tasks.status IN" in sql
        assert "tasks.priority IN" in sql
        assert "tasks.assignee_id = " in sql
        assert "tasks.due_date >= " in sql
        assert "todo" not in sql
        assert "u-1" not in sql

    def test_priority_sorts_by_rank(self):
        sql = _sql(sort="-priority")

        assert "CASE WHEN" in sql
        assert "THEN 3" in sql
        assert "ELSE 0 END DESC" in sql

    def test_due_date_null_placement(self):
        assert "tasks.due_date ASC NULLS LAST" in _sql(sort="dueDate")
        assert "tasks.due_date DESC NULLS FIRST" in _sql(sort="-dueDate")

    def test_sort_order_key_has_no_column(self):
        assert "ORDER BY tasks.created_at ASC, tasks.id ASC" in _sql(sort="sortOrder")

    def test_requested_keys_then_tie_break(self):
        assert "ORDER BY tasks.updated_at DESC, tasks.created_at ASC, tasks.id ASC" in _sql(sort="-updatedAt,createdAt")

    def test_seek_predicate_and_forced_order(self):
        sql = render_statement(build_task_statement(PROJECT_ID, _seek_query()))

        assert "tasks.created_at > " in sql
        assert "tasks.created_at = " in sql
        assert "tasks.id > " in sql
        assert "ORDER BY tasks.created_at ASC, tasks.id ASC" in sql

    def test_free_text_is_parameterized_and_escaped(self):
        injection = "' OR 1=1 --"
        sql = _sql(q=injection)

        assert "1=1" not in sql
        assert "lower(tasks.title) LIKE" in sql
        assert "ESCAPE" in sql


async def _seed(session, tasks) -> None:
    session.add_all(tasks)
    await session.commit()


async def _ids(session, project_id: str = PROJECT_ID, **options) -> list[str]:
    query = build_task_query(TaskQueryOptions(**options), project_id=project_id)
    rows = await TaskRepository().find_by_project(session, project_id, query)
    return [row.id for row in rows]


@pytest.mark.unit
class TestExecution:
    async def test_scoped_to_project(self, db_session):
        await _seed(db_session, [*sequential_tasks(3), make_task("foreign-1", project_id=OTHER_PROJECT_ID)])

        assert await _ids(db_session) == ["task-001", "task-002", "task-003"]
        assert await _ids(db_session, OTHER_PROJECT_ID) == ["foreign-1"]

    async def test_returns_limit_plus_one(self, db_session):
        await _seed(db_session, sequential_tasks(5))

        assert await _ids(db_session, limit=2) == ["task-001", "task-002", "task-003"]

    async def test_seek_after_position(self, db_session):
        await _seed(db_session, sequential_tasks(5))
        position = CursorPosition(
            created_at=BASE_TIME.replace(microsecond=2),
            id="task-002",
            project_id=PROJECT_ID,
            qhash="h",
            issued_at=0,
        )

        rows = await TaskRepository().find_by_project(db_session, PROJECT_ID, TaskQuery(limit=2, cursor=position))

        assert [row.id for row in rows] == ["task-003", "task-004", "task-005"]

    async def test_seek_tie_on_created_at_uses_id(self, db_session):
        same_time = {"created_at": BASE_TIME, "updated_at": BASE_TIME}
        await _seed(db_session, [make_task(f"t-{n}", **same_time) for n in "abcd"])
        position = CursorPosition(created_at=BASE_TIME, id="t-b", project_id=PROJECT_ID, qhash="h", issued_at=0)

        rows = await TaskRepository().find_by_project(db_session, PROJECT_ID, TaskQuery(limit=10, cursor=position))

        assert [row.id for row in rows] == ["t-c", "t-d"]

    async def test_due_date_nulls(self, db_session):
        await _seed(
            db_session,
            [
                make_task("no-due", created_offset_us=1),
                make_task("late", created_offset_us=2, due_date=datetime(2026, 3, 1, tzinfo=UTC)),
                make_task("early", created_offset_us=3, due_date=datetime(2026, 2, 1, tzinfo=UTC)),
            ],
        )

        assert await _ids(db_session, sort="dueDate") == ["early", "late", "no-due"]
        assert await _ids(db_session, sort="-dueDate") == ["no-due", "late", "early"]

    async def test_priority_rank_not_lexical(self, db_session):
        await _seed(
            db_session,
            [
                make_task("m", created_offset_us=1, priority="medium"),
                make_task("h", created_offset_us=2, priority="high"),
                make_task("l", created_offset_us=3, priority="low"),
                make_task("x", created_offset_us=4, priority="legacy"),
            ],
        )

        assert await _ids(db_session, sort="-priority") == ["h", "m", "l", "x"]
        assert await _ids(db_session, sort="priority") == ["x", "l", "m", "h"]

    async def test_due_date_window_is_inclusive(self, db_session):
        await _seed(
            db_session,
            [
                make_task("before", created_offset_us=1, due_date=datetime(2026, 1, 9, 23, 59, 59, 999999, tzinfo=UTC)),
                make_task("start", created_offset_us=2, due_date=datetime(2026, 1, 10, tzinfo=UTC)),
                make_task("end", created_offset_us=3, due_date=datetime(2026, 1, 10, 23, 59, 59, 999999, tzinfo=UTC)),
                make_task("after", created_offset_us=4, due_date=datetime(2026, 1, 11, tzinfo=UTC)),
                make_task("none", created_offset_us=5),
            ],
        )

        ids = await _ids(db_session, due_date_from="2026-01-10", due_date_to="2026-01-10")

        assert ids == ["start", "end"]

    async def test_injection_only_changes_match_count(self, db_session):
        await _seed(
            db_session,
            [
                make_task("plain", created_offset_us=1, title="Quarterly report"),
                make_task("quoted", created_offset_us=2, title="Fix ' OR 1=1 -- in parser"),
                make_task("foreign", project_id=OTHER_PROJECT_ID, title="' OR 1=1 --"),
            ],
        )

        assert await _ids(db_session, q="' OR 1=1 --") == ["quoted"]
        assert await _ids(db_session, q="report") == ["plain"]

    async def test_like_wildcards_match_literally(self, db_session):
        await _seed(
            db_session,
            [
                make_task("pct", created_offset_us=1, title="Reach 50% coverage"),
                make_task("plain", created_offset_us=2, title="Reach 500 users"),
                make_task("under", created_offset_us=3, title="snake_case names"),
            ],
        )

        assert await _ids(db_session, q="50%") == ["pct"]
        assert await _ids(db_session, q="%") == ["pct"]
        assert await _ids(db_session, q="e_c") == ["under"]

    async def test_free_text_case_insensitive(self, db_session):
        await _seed(db_session, [make_task("t", title="Weekly REPORT")])

        assert await _ids(db_session, q="weekly report") == ["t"]

    async def test_status_and_assignee_filters(self, db_session):
        await _seed(
            db_session,
            [
                make_task("a", created_offset_us=1, status="todo", assignee_id="u-1"),
                make_task("b", created_offset_us=2, status="in_progress", assignee_id="u-1"),
                make_task("c", created_offset_us=3, status="done", assignee_id="u-2"),
            ],
        )

        assert await _ids(db_session, status="doing,done") == ["b", "c"]
        assert await _ids(db_session, assignee_id="u-1") == ["a", "b"]


@pytest.mark.unit
class TestCollectionFilter:
    def test_renders_in_clause(self):
        stmt = CollectionFilter(Task.status, ["todo", "done"]).apply(select(Task))

        assert "tasks.status IN" in render_statement(stmt)

    def test_empty_collection_matches_nothing(self):
        stmt = CollectionFilter(Task.status, []).apply(select(Task))

        assert "false" in render_statement(stmt).lower()
