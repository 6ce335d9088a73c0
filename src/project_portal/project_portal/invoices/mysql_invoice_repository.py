from __future__ import annotations

from typing import Optional, Sequence

from ..access.scopes import Entity, Scope
from ..access.sql import scope_clause
from ..core.enums import InvoiceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fmt_date
from .repository import InvoiceRepository


class MySQLInvoiceRepository(InvoiceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_view(
        self,
        *,
        scope: Scope,
        status: Optional[InvoiceStatus] = None,
        limit: int = 200,
    ) -> Sequence[dict]:
        if scope.matches_nothing:
            return []

        clauses, params = scope_clause(scope, Entity.INVOICE)
        clauses = ["1=1"] + clauses
        if status is not None:
            clauses.append("i.status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT i.invoice_id, i.project_id, i.client_company_id, i.amount, i.status,
                       i.issue_date, i.due_date, p.name AS project_name, c.name AS client_name
                FROM invoices i
                JOIN projects p ON p.project_id = i.project_id
                LEFT JOIN client_companies c ON c.company_id = i.client_company_id
                WHERE {where}
                ORDER BY i.issue_date DESC, i.invoice_id DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            rows = fetchall(cur)
            out: list[dict] = []
            for r in rows:
                out.append(
                    {
                        "invoice_id": int(r["invoice_id"]),
                        "project_id": int(r["project_id"]),
                        "project_name": r.get("project_name") or "",
                        "client_company_id": r.get("client_company_id"),
                        "client_name": r.get("client_name") or "",
                        "amount": as_float(r.get("amount")) or 0.0,
                        "status": r["status"],
                        "issue_date": fmt_date(r.get("issue_date")),
                        "due_date": fmt_date(r.get("due_date")),
                    }
                )
            return out
