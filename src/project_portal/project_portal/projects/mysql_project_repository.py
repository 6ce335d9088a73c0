from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..access.scopes import Entity, Scope
from ..access.sql import scope_clause
from ..core.enums import ProjectStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone, fmt_date, fmt_datetime, like_pattern
from .model import Project
from .repository import ProjectRepository

_COLUMNS = """
    p.project_id, p.name, p.description, p.status, p.client_company_id,
    p.start_date, p.deadline, p.budget, p.created_by, p.created_at
"""


def _to_project(r: Dict[str, Any]) -> Project:
    return Project(
        project_id=int(r["project_id"]),
        name=r["name"],
        description=r.get("description"),
        status=ProjectStatus(r["status"]),
        client_company_id=(int(r["client_company_id"]) if r.get("client_company_id") is not None else None),
        start_date=r.get("start_date"),
        deadline=r.get("deadline"),
        budget=as_float(r.get("budget")),
        created_by=(int(r["created_by"]) if r.get("created_by") is not None else None),
        created_at=r.get("created_at"),
    )


class MySQLProjectRepository(ProjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, project_id: int) -> Optional[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM projects p WHERE p.project_id=%s", (int(project_id),))
            r = fetchone(cur)
            return _to_project(r) if r else None

    def get_visible(self, project_id: int, scope: Scope) -> Optional[Project]:
        if scope.matches_nothing:
            return None

        clauses, params = scope_clause(scope, Entity.PROJECT)
        clauses = ["p.project_id=%s"] + clauses
        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM projects p WHERE {where}", tuple([int(project_id)] + params))
            r = fetchone(cur)
            return _to_project(r) if r else None

    def list_view(
        self,
        *,
        scope: Scope,
        status: Optional[ProjectStatus] = None,
        search: Optional[str] = None,
        limit: int = 200,
    ) -> Sequence[dict]:
        if scope.matches_nothing:
            return []

        clauses, params = scope_clause(scope, Entity.PROJECT)
        clauses = ["1=1"] + clauses

        if status is not None:
            clauses.append("p.status=%s")
            params.append(status.value)
        if search:
            pattern = like_pattern(search)
            clauses.append("(p.name LIKE %s OR p.description LIKE %s)")
            params.extend([pattern, pattern])

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, c.name AS client_name,
                       (SELECT COUNT(*) FROM tasks t WHERE t.project_id = p.project_id) AS task_count,
                       (SELECT COUNT(*) FROM tasks t
                        WHERE t.project_id = p.project_id AND t.status = 'completed') AS completed_task_count,
                       (SELECT COUNT(*) FROM project_members m WHERE m.project_id = p.project_id) AS member_count
                FROM projects p
                LEFT JOIN client_companies c ON c.company_id = p.client_company_id
                WHERE {where}
                ORDER BY p.created_at DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            rows = fetchall(cur)
            out: list[dict] = []
            for r in rows:
                out.append(
                    {
                        "project_id": int(r["project_id"]),
                        "name": r["name"],
                        "description": r.get("description") or "",
                        "status": r["status"],
                        "client_company_id": r.get("client_company_id"),
                        "client_name": r.get("client_name") or "",
                        "start_date": fmt_date(r.get("start_date")),
                        "deadline": fmt_date(r.get("deadline")),
                        "budget": as_float(r.get("budget")),
                        "task_count": int(r.get("task_count") or 0),
                        "completed_task_count": int(r.get("completed_task_count") or 0),
                        "member_count": int(r.get("member_count") or 0),
                        "created_at": fmt_datetime(r.get("created_at")),
                    }
                )
            return out

    def list_options(self, *, scope: Scope) -> Sequence[dict]:
        if scope.matches_nothing:
            return []

        clauses, params = scope_clause(scope, Entity.PROJECT)
        where = " AND ".join(["1=1"] + clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT p.project_id, p.name FROM projects p WHERE {where} ORDER BY p.name ASC", tuple(params))
            return [{"project_id": int(r["project_id"]), "name": r["name"]} for r in fetchall(cur)]

    def is_member(self, project_id: int, profile_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS found FROM project_members WHERE project_id=%s AND profile_id=%s",
                (int(project_id), int(profile_id)),
            )
            return fetchone(cur) is not None

    def create(
        self,
        *,
        name: str,
        description: Optional[str],
        status: ProjectStatus,
        client_company_id: Optional[int],
        start_date: Optional[date],
        deadline: Optional[date],
        budget: Optional[float],
        created_by: int,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO projects(name, description, status, client_company_id, start_date, deadline, budget, created_by)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (name, description, status.value, client_company_id, start_date, deadline, budget, int(created_by)),
            )
            return int(cur.lastrowid)

    def update_status(self, *, project_id: int, expected: ProjectStatus, status: ProjectStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE projects
                SET status=%s, updated_at=NOW()
                WHERE project_id=%s AND status=%s
                """,
                (status.value, int(project_id), expected.value),
            )
            return cur.rowcount > 0

    def delete(self, project_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM projects WHERE project_id=%s", (int(project_id),))
            return cur.rowcount > 0

    def add_member(self, *, project_id: int, profile_id: int, role: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT IGNORE INTO project_members(project_id, profile_id, role)
                VALUES(%s,%s,%s)
                """,
                (int(project_id), int(profile_id), role),
            )
            return cur.rowcount > 0

    def list_members(self, project_id: int) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT m.profile_id, m.role AS member_role, m.joined_at,
                       pr.full_name, pr.email, pr.job_title, pr.role
                FROM project_members m
                JOIN profiles pr ON pr.profile_id = m.profile_id
                WHERE m.project_id=%s
                ORDER BY pr.full_name ASC
                """,
                (int(project_id),),
            )
            rows = fetchall(cur)
            return [
                {
                    "profile_id": int(r["profile_id"]),
                    "full_name": r.get("full_name") or r["email"],
                    "email": r["email"],
                    "job_title": r.get("job_title") or "",
                    "role": r["role"],
                    "member_role": r.get("member_role") or "",
                    "joined_at": fmt_datetime(r.get("joined_at")),
                }
                for r in rows
            ]
