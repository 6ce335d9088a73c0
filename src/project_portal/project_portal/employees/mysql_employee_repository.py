from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import EmployeeStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fmt_date, like_pattern
from .department_model import Department
from .repository import EmployeeRepository


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_view(
        self,
        *,
        department_id: Optional[int] = None,
        status: Optional[EmployeeStatus] = None,
        search: Optional[str] = None,
        limit: int = 200,
    ) -> Sequence[dict]:
        clauses = ["1=1"]
        params: list[object] = []

        if department_id is not None:
            clauses.append("e.department_id=%s")
            params.append(int(department_id))
        if status is not None:
            clauses.append("e.status=%s")
            params.append(status.value)
        if search:
            pattern = like_pattern(search)
            clauses.append("(p.full_name LIKE %s OR p.email LIKE %s OR p.job_title LIKE %s)")
            params.extend([pattern, pattern, pattern])

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT e.employee_id, e.profile_id, e.department_id, e.hire_date, e.status, e.contract_type,
                       p.full_name, p.email, p.job_title, p.phone, p.role,
                       d.name AS department_name
                FROM employee_records e
                JOIN profiles p ON p.profile_id = e.profile_id
                LEFT JOIN departments d ON d.department_id = e.department_id
                WHERE {where}
                ORDER BY p.full_name ASC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            rows = fetchall(cur)
            out: list[dict] = []
            for r in rows:
                out.append(
                    {
                        "employee_id": int(r["employee_id"]),
                        "profile_id": int(r["profile_id"]),
                        "full_name": r.get("full_name") or r["email"],
                        "email": r["email"],
                        "job_title": r.get("job_title") or "",
                        "phone": r.get("phone") or "",
                        "role": r["role"],
                        "department_id": r.get("department_id"),
                        "department_name": r.get("department_name") or "",
                        "hire_date": fmt_date(r.get("hire_date")),
                        "status": r["status"],
                        "contract_type": r.get("contract_type") or "",
                    }
                )
            return out

    def list_departments(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT d.department_id, d.name, d.description,
                       (SELECT COUNT(*) FROM employee_records e WHERE e.department_id = d.department_id) AS employee_count
                FROM departments d
                ORDER BY d.name
                """
            )
            rows = fetchall(cur)
            return [
                Department(
                    department_id=int(r["department_id"]),
                    name=r["name"],
                    description=r.get("description"),
                    employee_count=int(r.get("employee_count") or 0),
                )
                for r in rows
            ]
