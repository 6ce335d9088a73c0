from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..access.scopes import Entity, Scope
from ..access.sql import scope_clause
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fmt_datetime, like_pattern
from .repository import DocumentRepository

_SELECT = """
    SELECT d.document_id, d.project_id, d.client_company_id, d.name, d.file_path, d.file_type,
           d.uploaded_by, d.uploaded_at, p.name AS project_name, pr.full_name AS uploaded_by_name
    FROM documents d
    JOIN projects p ON p.project_id = d.project_id
    LEFT JOIN profiles pr ON pr.profile_id = d.uploaded_by
"""


def _to_row(r: Dict[str, Any]) -> dict:
    return {
        "document_id": int(r["document_id"]),
        "project_id": int(r["project_id"]),
        "project_name": r.get("project_name") or "",
        "client_company_id": r.get("client_company_id"),
        "name": r["name"],
        "file_path": r["file_path"],
        "file_type": r.get("file_type") or "",
        "uploaded_by_name": r.get("uploaded_by_name") or "",
        "uploaded_at": fmt_datetime(r.get("uploaded_at")),
    }


class MySQLDocumentRepository(DocumentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_view(self, *, scope: Scope, search: Optional[str] = None, limit: int = 200) -> Sequence[dict]:
        if scope.matches_nothing:
            return []

        clauses, params = scope_clause(scope, Entity.DOCUMENT)
        clauses = ["1=1"] + clauses
        if search:
            clauses.append("d.name LIKE %s")
            params.append(like_pattern(search))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE {where} ORDER BY d.uploaded_at DESC LIMIT %s",
                tuple(params + [int(limit)]),
            )
            return [_to_row(r) for r in fetchall(cur)]

    def list_for_project(self, project_id: int) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE d.project_id=%s ORDER BY d.uploaded_at DESC", (int(project_id),))
            return [_to_row(r) for r in fetchall(cur)]
