from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..access.context import CallerContext
from ..access.policy import require_role, visibility_for
from ..access.scopes import Entity
from ..common.validators import optional_enum, optional_int, require_date, require_enum
from ..core.enums import EMPLOYEE_ROLES, STAFF_ROLES, LeaveStatus, LeaveType
from ..core.exceptions import AuthorizationError, NotFoundError, TransitionConflictError, ValidationError
from .model import LeaveRequest
from .repository import LeaveRequestRepository

logger = logging.getLogger(__name__)


class LeaveService:
    """Leave requests: ``pending`` -> ``approved`` | ``rejected``.

    Decisions are a single conditional write on ``status='pending'``. When it
    matches no row the request is re-read to tell a missing request from one
    another reviewer already decided.
    """

    def __init__(self, leaves: LeaveRequestRepository):
        self._leaves = leaves

    def submit(
        self,
        caller: CallerContext,
        *,
        leave_type: object,
        start_date: str,
        end_date: str,
        reason: str = "",
        user_id: object = None,
    ) -> LeaveRequest:
        require_role(caller, EMPLOYEE_ROLES, "Only employees can request leave")

        owner = optional_int(user_id, "Employee")
        if owner is None:
            owner = caller.profile_id
        elif owner != caller.profile_id and caller.role not in STAFF_ROLES:
            raise AuthorizationError("You can only request leave for yourself")

        kind = require_enum(LeaveType, leave_type, "Leave type")
        start = require_date(start_date, "Start date")
        end = require_date(end_date, "End date")
        if end < start:
            raise ValidationError("End date cannot be before the start date")

        request_id = self._leaves.create(
            user_id=owner,
            leave_type=kind,
            start_date=start,
            end_date=end,
            reason=(reason or "").strip() or None,
        )
        logger.info("profile=%s filed leave request=%s for user=%s", caller.profile_id, request_id, owner)

        created = self._leaves.get(request_id)
        if not created:
            raise NotFoundError("Leave request not found")
        return created

    def approve(self, caller: CallerContext, request_id: int) -> LeaveRequest:
        return self._decide(caller, request_id, LeaveStatus.APPROVED)

    def reject(self, caller: CallerContext, request_id: int) -> LeaveRequest:
        return self._decide(caller, request_id, LeaveStatus.REJECTED)

    def _decide(self, caller: CallerContext, request_id: int, status: LeaveStatus) -> LeaveRequest:
        require_role(caller, STAFF_ROLES, "Only admin or HR can review leave requests")

        if not self._leaves.decide(request_id=int(request_id), status=status, reviewed_by=caller.profile_id):
            current = self._leaves.get(int(request_id))
            if not current:
                raise NotFoundError("Leave request not found")
            logger.info(
                "profile=%s lost decision on leave request=%s (already %s)",
                caller.profile_id,
                request_id,
                current.status.value,
            )
            raise TransitionConflictError(
                f"Leave request was already {current.status.value}",
                current_status=current.status.value,
            )

        decided = self._leaves.get(int(request_id))
        if not decided:
            raise NotFoundError("Leave request not found")

        logger.info("profile=%s %s leave request=%s", caller.profile_id, status.value, request_id)
        return decided

    def list_for_review(
        self,
        caller: CallerContext,
        *,
        status: object = None,
        search: Optional[str] = None,
    ) -> Sequence[dict]:
        visibility_for(caller, Entity.LEAVE_REQUEST)
        return self._leaves.list_view(
            status=optional_enum(LeaveStatus, status, "Status"),
            search=(search or "").strip() or None,
        )

    def list_mine(self, caller: CallerContext, *, status: object = None) -> Sequence[dict]:
        require_role(caller, EMPLOYEE_ROLES, "Only employees have leave requests")
        return self._leaves.list_view(
            status=optional_enum(LeaveStatus, status, "Status"),
            user_id=caller.profile_id,
        )


def leave_to_dict(r: LeaveRequest) -> dict:
    return {
        "request_id": r.request_id,
        "user_id": r.user_id,
        "leave_type": r.leave_type.value,
        "start_date": r.start_date.strftime("%Y-%m-%d"),
        "end_date": r.end_date.strftime("%Y-%m-%d"),
        "duration_days": r.duration_days,
        "reason": r.reason or "",
        "status": r.status.value,
        "reviewed_by": r.reviewed_by,
        "reviewed_at": r.reviewed_at.strftime("%Y-%m-%d %H:%M") if r.reviewed_at else "",
    }
