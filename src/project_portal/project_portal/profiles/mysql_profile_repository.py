from __future__ import annotations

from typing import Any, Dict, Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Profile
from .repository import ProfileRepository

_COLUMNS = """
    profile_id, email, full_name, password_hash, role, client_company_id,
    department, job_title, phone, is_active, profile_completed
"""


def _to_profile(r: Dict[str, Any]) -> Profile:
    return Profile(
        profile_id=int(r["profile_id"]),
        email=r["email"],
        full_name=r.get("full_name"),
        password_hash=r["password_hash"],
        role=str(r["role"]),
        client_company_id=(int(r["client_company_id"]) if r.get("client_company_id") is not None else None),
        department=r.get("department"),
        job_title=r.get("job_title"),
        phone=r.get("phone"),
        is_active=bool(r.get("is_active", True)),
        profile_completed=bool(r.get("profile_completed", False)),
    )


class MySQLProfileRepository(ProfileRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, profile_id: int) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE profile_id=%s", (int(profile_id),))
            row = fetchone(cur)
            return _to_profile(row) if row else None

    def get_by_email(self, email: str) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_profile(row) if row else None

    def complete_profile(
        self,
        *,
        profile_id: int,
        full_name: str,
        role: Role,
        job_title: Optional[str],
        department: Optional[str],
        phone: Optional[str],
        client_company_id: Optional[int],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE profiles
                SET full_name=%s, role=%s, job_title=%s, department=%s, phone=%s,
                    client_company_id=%s, profile_completed=1, updated_at=NOW()
                WHERE profile_id=%s AND profile_completed=0
                """,
                (full_name, role.value, job_title, department, phone, client_company_id, int(profile_id)),
            )
            return cur.rowcount > 0
