from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType
from .model import LeaveRequest


class LeaveRequestRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: Optional[str],
    ) -> int:
        raise NotImplementedError

    def get(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def decide(self, *, request_id: int, status: LeaveStatus, reviewed_by: int) -> bool:
        """Move a pending request to ``status`` in one conditional write.

        Returns False when no pending row matched, either because the request
        does not exist or because it was already decided.
        """

        raise NotImplementedError

    def list_view(
        self,
        *,
        status: Optional[LeaveStatus] = None,
        user_id: Optional[int] = None,
        search: Optional[str] = None,
        limit: int = 200,
    ) -> Sequence[dict]:
        raise NotImplementedError
