from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, fmt_datetime, like_pattern
from .model import ClientCompany
from .repository import ClientRepository


def _to_company(r: Dict[str, Any]) -> ClientCompany:
    return ClientCompany(
        company_id=int(r["company_id"]),
        name=r["name"],
        contact_name=r.get("contact_name"),
        contact_email=r.get("contact_email"),
        contact_phone=r.get("contact_phone"),
        website=r.get("website"),
        is_active=bool(r.get("is_active", True)),
        created_at=r.get("created_at"),
    )


class MySQLClientRepository(ClientRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, company_id: int) -> Optional[ClientCompany]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT company_id, name, contact_name, contact_email, contact_phone, website, is_active, created_at
                FROM client_companies
                WHERE company_id=%s
                """,
                (int(company_id),),
            )
            r = fetchone(cur)
            return _to_company(r) if r else None

    def get_by_name(self, name: str) -> Optional[ClientCompany]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT company_id, name, contact_name, contact_email, contact_phone, website, is_active, created_at
                FROM client_companies
                WHERE name=%s
                """,
                (name,),
            )
            r = fetchone(cur)
            return _to_company(r) if r else None

    def create(
        self,
        *,
        name: str,
        contact_name: Optional[str] = None,
        contact_email: Optional[str] = None,
        contact_phone: Optional[str] = None,
        website: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO client_companies(name, contact_name, contact_email, contact_phone, website, is_active)
                VALUES(%s,%s,%s,%s,%s,1)
                """,
                (name, contact_name, contact_email, contact_phone, website),
            )
            return int(cur.lastrowid)

    def list_view(self, *, search: Optional[str] = None, limit: int = 200) -> Sequence[dict]:
        clauses = ["1=1"]
        params: list[object] = []

        if search:
            pattern = like_pattern(search)
            clauses.append("(c.name LIKE %s OR c.contact_name LIKE %s OR c.contact_email LIKE %s)")
            params.extend([pattern, pattern, pattern])

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT c.company_id, c.name, c.contact_name, c.contact_email, c.contact_phone,
                       c.website, c.is_active, c.created_at,
                       (SELECT COUNT(*) FROM projects p WHERE p.client_company_id = c.company_id) AS project_count,
                       (SELECT COUNT(*) FROM profiles pr WHERE pr.client_company_id = c.company_id) AS contact_count
                FROM client_companies c
                WHERE {where}
                ORDER BY c.name ASC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            rows = fetchall(cur)
            out: list[dict] = []
            for r in rows:
                out.append(
                    {
                        "company_id": int(r["company_id"]),
                        "name": r["name"],
                        "contact_name": r.get("contact_name") or "",
                        "contact_email": r.get("contact_email") or "",
                        "contact_phone": r.get("contact_phone") or "",
                        "website": r.get("website") or "",
                        "is_active": bool(r.get("is_active", True)),
                        "project_count": int(r.get("project_count") or 0),
                        "contact_count": int(r.get("contact_count") or 0),
                        "created_at": fmt_datetime(r.get("created_at")),
                    }
                )
            return out
