from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, fmt_date, fmt_datetime, like_pattern
from .model import LeaveRequest, leave_duration_days
from .repository import LeaveRequestRepository


class MySQLLeaveRequestRepository(LeaveRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(user_id, leave_type, start_date, end_date, reason, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), leave_type.value, start_date, end_date, reason, LeaveStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def get(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT request_id, user_id, leave_type, start_date, end_date, reason,
                       status, reviewed_by, reviewed_at, created_at
                FROM leave_requests
                WHERE request_id=%s
                """,
                (int(request_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return LeaveRequest(
                request_id=int(r["request_id"]),
                user_id=int(r["user_id"]),
                leave_type=LeaveType(r["leave_type"]),
                start_date=r["start_date"],
                end_date=r["end_date"],
                reason=r.get("reason"),
                status=LeaveStatus(r["status"]),
                reviewed_by=(int(r["reviewed_by"]) if r.get("reviewed_by") is not None else None),
                reviewed_at=r.get("reviewed_at"),
                created_at=r.get("created_at"),
            )

    def decide(self, *, request_id: int, status: LeaveStatus, reviewed_by: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, reviewed_by=%s, reviewed_at=NOW()
                WHERE request_id=%s AND status=%s
                """,
                (status.value, int(reviewed_by), int(request_id), LeaveStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def list_view(
        self,
        *,
        status: Optional[LeaveStatus] = None,
        user_id: Optional[int] = None,
        search: Optional[str] = None,
        limit: int = 200,
    ) -> Sequence[dict]:
        clauses = ["1=1"]
        params: list[object] = []

        if status is not None:
            clauses.append("r.status=%s")
            params.append(status.value)
        if user_id is not None:
            clauses.append("r.user_id=%s")
            params.append(int(user_id))
        if search:
            pattern = like_pattern(search)
            clauses.append("(u.full_name LIKE %s OR r.reason LIKE %s)")
            params.extend([pattern, pattern])

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT r.request_id, r.user_id, u.full_name, u.email,
                       r.leave_type, r.start_date, r.end_date, r.reason,
                       r.status, r.created_at, r.reviewed_by, r.reviewed_at,
                       rv.full_name AS reviewer_name
                FROM leave_requests r
                JOIN profiles u ON u.profile_id = r.user_id
                LEFT JOIN profiles rv ON rv.profile_id = r.reviewed_by
                WHERE {where}
                ORDER BY r.created_at DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            rows = fetchall(cur)
            out: list[dict] = []
            for r in rows:
                out.append(
                    {
                        "request_id": int(r["request_id"]),
                        "user_id": int(r["user_id"]),
                        "full_name": r.get("full_name") or r["email"],
                        "leave_type": r["leave_type"],
                        "start_date": fmt_date(r["start_date"]),
                        "end_date": fmt_date(r["end_date"]),
                        "duration_days": leave_duration_days(r["start_date"], r["end_date"]),
                        "reason": r.get("reason") or "",
                        "status": r["status"],
                        "created_at": fmt_datetime(r.get("created_at")),
                        "reviewer_name": r.get("reviewer_name") or "",
                        "reviewed_at": fmt_datetime(r.get("reviewed_at")),
                    }
                )
            return out
