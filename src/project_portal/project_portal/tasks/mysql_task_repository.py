from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..access.scopes import Entity, Scope
from ..access.sql import scope_clause
from ..core.enums import TaskPriority, TaskStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, fmt_datetime, like_pattern
from .model import Task
from .repository import TaskRepository

_COLUMNS = """
    t.task_id, t.project_id, t.title, t.description, t.assignee_id,
    t.status, t.priority, t.due_date, t.created_by, t.created_at
"""


def _to_task(r: Dict[str, Any]) -> Task:
    return Task(
        task_id=int(r["task_id"]),
        project_id=int(r["project_id"]),
        title=r["title"],
        description=r.get("description"),
        assignee_id=(int(r["assignee_id"]) if r.get("assignee_id") is not None else None),
        status=TaskStatus(r["status"]),
        priority=TaskPriority(r["priority"]),
        due_date=r.get("due_date"),
        created_by=(int(r["created_by"]) if r.get("created_by") is not None else None),
        created_at=r.get("created_at"),
    )


def _to_row(r: Dict[str, Any]) -> dict:
    return {
        "task_id": int(r["task_id"]),
        "project_id": int(r["project_id"]),
        "project_name": r.get("project_name") or "",
        "title": r["title"],
        "description": r.get("description") or "",
        "assignee_id": (int(r["assignee_id"]) if r.get("assignee_id") is not None else None),
        "assignee_name": r.get("assignee_name") or "",
        "status": r["status"],
        "priority": r["priority"],
        "due_date": r.get("due_date"),
        "created_at": fmt_datetime(r.get("created_at")),
    }


class MySQLTaskRepository(TaskRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, task_id: int) -> Optional[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM tasks t WHERE t.task_id=%s", (int(task_id),))
            r = fetchone(cur)
            return _to_task(r) if r else None

    def get_visible(self, task_id: int, scope: Scope) -> Optional[Task]:
        if scope.matches_nothing:
            return None

        clauses, params = scope_clause(scope, Entity.TASK)
        where = " AND ".join(["t.task_id=%s"] + clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM tasks t WHERE {where}", tuple([int(task_id)] + params))
            r = fetchone(cur)
            return _to_task(r) if r else None

    def list_view(
        self,
        *,
        scope: Scope,
        status: Optional[TaskStatus] = None,
        project_id: Optional[int] = None,
        search: Optional[str] = None,
        limit: int = 200,
    ) -> Sequence[dict]:
        if scope.matches_nothing:
            return []

        clauses, params = scope_clause(scope, Entity.TASK)
        clauses = ["1=1"] + clauses

        if status is not None:
            clauses.append("t.status=%s")
            params.append(status.value)
        if project_id is not None:
            clauses.append("t.project_id=%s")
            params.append(int(project_id))
        if search:
            pattern = like_pattern(search)
            clauses.append("(t.title LIKE %s OR t.description LIKE %s)")
            params.extend([pattern, pattern])

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, p.name AS project_name, pr.full_name AS assignee_name
                FROM tasks t
                JOIN projects p ON p.project_id = t.project_id
                LEFT JOIN profiles pr ON pr.profile_id = t.assignee_id
                WHERE {where}
                ORDER BY t.due_date IS NULL, t.due_date ASC, t.task_id ASC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_row(r) for r in fetchall(cur)]

    def list_for_project(self, project_id: int) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, p.name AS project_name, pr.full_name AS assignee_name
                FROM tasks t
                JOIN projects p ON p.project_id = t.project_id
                LEFT JOIN profiles pr ON pr.profile_id = t.assignee_id
                WHERE t.project_id=%s
                ORDER BY t.created_at DESC
                """,
                (int(project_id),),
            )
            return [_to_row(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        project_id: int,
        title: str,
        description: Optional[str],
        assignee_id: Optional[int],
        status: TaskStatus,
        priority: TaskPriority,
        due_date: Optional[date],
        created_by: int,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO tasks(project_id, title, description, assignee_id, status, priority, due_date, created_by)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(project_id),
                    title,
                    description,
                    assignee_id,
                    status.value,
                    priority.value,
                    due_date,
                    int(created_by),
                ),
            )
            return int(cur.lastrowid)

    def update_status(self, *, task_id: int, expected: TaskStatus, status: TaskStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE tasks
                SET status=%s, updated_at=NOW()
                WHERE task_id=%s AND status=%s
                """,
                (status.value, int(task_id), expected.value),
            )
            return cur.rowcount > 0
