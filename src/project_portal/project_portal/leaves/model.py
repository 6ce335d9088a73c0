from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveStatus, LeaveType


def leave_duration_days(start_date: date, end_date: date) -> int:
    """Inclusive day count: 2024-01-01 to 2024-01-05 is 5 days."""

    return (end_date - start_date).days + 1


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    user_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: Optional[str]
    status: LeaveStatus
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def duration_days(self) -> int:
        return leave_duration_days(self.start_date, self.end_date)
