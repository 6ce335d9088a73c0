from __future__ import annotations

from datetime import date
from typing import Dict

from ..core.enums import LeaveStatus, ProjectStatus, Role, TaskStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone, fmt_date, fmt_datetime
from .repository import DashboardRepository


def _count(cur, sql: str, params: tuple = ()) -> int:
    cur.execute(sql, params)
    r = fetchone(cur)
    return int(r["n"]) if r and r.get("n") is not None else 0


def _distribution(cur, sql: str, params: tuple = ()) -> Dict[str, int]:
    cur.execute(sql, params)
    return {r["status"]: int(r["n"]) for r in fetchall(cur)}


def _project_row(r: dict) -> dict:
    return {
        "project_id": int(r["project_id"]),
        "name": r["name"],
        "status": r["status"],
        "deadline": fmt_date(r.get("deadline")),
        "created_at": fmt_datetime(r.get("created_at")),
    }


def _task_row(r: dict) -> dict:
    return {
        "task_id": int(r["task_id"]),
        "title": r["title"],
        "project_name": r.get("project_name") or "",
        "status": r["status"],
        "priority": r["priority"],
        "due_date": r.get("due_date"),
    }


class MySQLDashboardRepository(DashboardRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def admin_summary(self, *, recent_limit: int = 5) -> dict:
        with db_cursor(self._conn_factory) as (_, cur):
            counts = {
                "projects": _count(cur, "SELECT COUNT(*) AS n FROM projects"),
                "tasks": _count(cur, "SELECT COUNT(*) AS n FROM tasks"),
                "team_members": _count(
                    cur, "SELECT COUNT(*) AS n FROM profiles WHERE role=%s AND is_active=1", (Role.TEAM.value,)
                ),
                "clients": _count(cur, "SELECT COUNT(*) AS n FROM client_companies"),
                "invoices": _count(cur, "SELECT COUNT(*) AS n FROM invoices"),
            }

            cur.execute(
                """
                SELECT project_id, name, status, deadline, created_at
                FROM projects
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (int(recent_limit),),
            )
            recent_projects = [_project_row(r) for r in fetchall(cur)]

            cur.execute(
                """
                SELECT t.task_id, t.title, t.status, t.priority, t.due_date, p.name AS project_name
                FROM tasks t
                JOIN projects p ON p.project_id = t.project_id
                ORDER BY t.created_at DESC
                LIMIT %s
                """,
                (int(recent_limit),),
            )
            recent_tasks = [_task_row(r) for r in fetchall(cur)]

            project_status = _distribution(cur, "SELECT status, COUNT(*) AS n FROM projects GROUP BY status")

        return {
            "counts": counts,
            "recent_projects": recent_projects,
            "recent_tasks": recent_tasks,
            "project_status": project_status,
        }

    def hr_summary(self, *, hired_since: date, recent_limit: int = 5) -> dict:
        with db_cursor(self._conn_factory) as (_, cur):
            counts = {
                "employees": _count(cur, "SELECT COUNT(*) AS n FROM employee_records"),
                "departments": _count(cur, "SELECT COUNT(*) AS n FROM departments"),
                "pending_leave_requests": _count(
                    cur, "SELECT COUNT(*) AS n FROM leave_requests WHERE status=%s", (LeaveStatus.PENDING.value,)
                ),
                "new_hires": _count(
                    cur, "SELECT COUNT(*) AS n FROM employee_records WHERE hire_date >= %s", (hired_since,)
                ),
            }

            cur.execute(
                """
                SELECT e.employee_id, e.hire_date, e.status, p.full_name, p.email, p.job_title,
                       d.name AS department_name
                FROM employee_records e
                JOIN profiles p ON p.profile_id = e.profile_id
                LEFT JOIN departments d ON d.department_id = e.department_id
                ORDER BY e.hire_date DESC, e.employee_id DESC
                LIMIT %s
                """,
                (int(recent_limit),),
            )
            recent_employees = [
                {
                    "employee_id": int(r["employee_id"]),
                    "full_name": r.get("full_name") or r["email"],
                    "job_title": r.get("job_title") or "",
                    "department_name": r.get("department_name") or "",
                    "hire_date": fmt_date(r.get("hire_date")),
                    "status": r["status"],
                }
                for r in fetchall(cur)
            ]

            cur.execute(
                """
                SELECT r.request_id, r.leave_type, r.start_date, r.end_date, r.status, u.full_name, u.email
                FROM leave_requests r
                JOIN profiles u ON u.profile_id = r.user_id
                ORDER BY r.created_at DESC
                LIMIT %s
                """,
                (int(recent_limit),),
            )
            recent_leave_requests = [
                {
                    "request_id": int(r["request_id"]),
                    "full_name": r.get("full_name") or r["email"],
                    "leave_type": r["leave_type"],
                    "start_date": fmt_date(r["start_date"]),
                    "end_date": fmt_date(r["end_date"]),
                    "status": r["status"],
                }
                for r in fetchall(cur)
            ]

        return {
            "counts": counts,
            "recent_employees": recent_employees,
            "recent_leave_requests": recent_leave_requests,
        }

    def team_summary(self, *, profile_id: int, recent_limit: int = 5) -> dict:
        pid = int(profile_id)
        with db_cursor(self._conn_factory) as (_, cur):
            counts = {
                "assigned_tasks": _count(cur, "SELECT COUNT(*) AS n FROM tasks WHERE assignee_id=%s", (pid,)),
                "completed_tasks": _count(
                    cur,
                    "SELECT COUNT(*) AS n FROM tasks WHERE assignee_id=%s AND status=%s",
                    (pid, TaskStatus.COMPLETED.value),
                ),
                "projects": _count(cur, "SELECT COUNT(*) AS n FROM project_members WHERE profile_id=%s", (pid,)),
            }

            cur.execute(
                """
                SELECT t.task_id, t.title, t.status, t.priority, t.due_date, p.name AS project_name
                FROM tasks t
                JOIN projects p ON p.project_id = t.project_id
                WHERE t.assignee_id=%s AND t.status <> %s
                ORDER BY t.due_date IS NULL, t.due_date ASC
                LIMIT %s
                """,
                (pid, TaskStatus.COMPLETED.value, int(recent_limit)),
            )
            upcoming_tasks = [_task_row(r) for r in fetchall(cur)]

            cur.execute(
                """
                SELECT p.project_id, p.name, p.status, p.deadline, p.created_at, m.role AS member_role
                FROM project_members m
                JOIN projects p ON p.project_id = m.project_id
                WHERE m.profile_id=%s
                ORDER BY p.created_at DESC
                """,
                (pid,),
            )
            projects = []
            for r in fetchall(cur):
                row = _project_row(r)
                row["member_role"] = r.get("member_role") or ""
                projects.append(row)

            task_status = _distribution(
                cur, "SELECT status, COUNT(*) AS n FROM tasks WHERE assignee_id=%s GROUP BY status", (pid,)
            )

        return {
            "counts": counts,
            "upcoming_tasks": upcoming_tasks,
            "projects": projects,
            "task_status": task_status,
        }

    def client_summary(self, *, company_id: int, recent_limit: int = 5) -> dict:
        cid = int(company_id)
        with db_cursor(self._conn_factory) as (_, cur):
            counts = {
                "projects": _count(cur, "SELECT COUNT(*) AS n FROM projects WHERE client_company_id=%s", (cid,)),
                "projects_in_progress": _count(
                    cur,
                    "SELECT COUNT(*) AS n FROM projects WHERE client_company_id=%s AND status=%s",
                    (cid, ProjectStatus.IN_PROGRESS.value),
                ),
                "projects_completed": _count(
                    cur,
                    "SELECT COUNT(*) AS n FROM projects WHERE client_company_id=%s AND status=%s",
                    (cid, ProjectStatus.COMPLETED.value),
                ),
                "invoices": _count(cur, "SELECT COUNT(*) AS n FROM invoices WHERE client_company_id=%s", (cid,)),
                "documents": _count(cur, "SELECT COUNT(*) AS n FROM documents WHERE client_company_id=%s", (cid,)),
            }

            cur.execute(
                """
                SELECT project_id, name, status, deadline, created_at
                FROM projects
                WHERE client_company_id=%s
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (cid, int(recent_limit)),
            )
            recent_projects = [_project_row(r) for r in fetchall(cur)]

            cur.execute(
                """
                SELECT i.invoice_id, i.amount, i.status, i.issue_date, i.due_date, p.name AS project_name
                FROM invoices i
                JOIN projects p ON p.project_id = i.project_id
                WHERE i.client_company_id=%s
                ORDER BY i.issue_date DESC, i.invoice_id DESC
                LIMIT %s
                """,
                (cid, int(recent_limit)),
            )
            recent_invoices = [
                {
                    "invoice_id": int(r["invoice_id"]),
                    "project_name": r.get("project_name") or "",
                    "amount": as_float(r.get("amount")) or 0.0,
                    "status": r["status"],
                    "issue_date": fmt_date(r.get("issue_date")),
                    "due_date": fmt_date(r.get("due_date")),
                }
                for r in fetchall(cur)
            ]

            cur.execute(
                """
                SELECT d.document_id, d.name, d.file_type, d.uploaded_at, p.name AS project_name
                FROM documents d
                JOIN projects p ON p.project_id = d.project_id
                WHERE d.client_company_id=%s
                ORDER BY d.uploaded_at DESC
                LIMIT %s
                """,
                (cid, int(recent_limit)),
            )
            recent_documents = [
                {
                    "document_id": int(r["document_id"]),
                    "name": r["name"],
                    "file_type": r.get("file_type") or "",
                    "project_name": r.get("project_name") or "",
                    "uploaded_at": fmt_datetime(r.get("uploaded_at")),
                }
                for r in fetchall(cur)
            ]

            project_status = _distribution(
                cur, "SELECT status, COUNT(*) AS n FROM projects WHERE client_company_id=%s GROUP BY status", (cid,)
            )

        return {
            "counts": counts,
            "recent_projects": recent_projects,
            "recent_invoices": recent_invoices,
            "recent_documents": recent_documents,
            "project_status": project_status,
        }
