from __future__ import annotations

from enum import Enum
from typing import Optional


class Role(str, Enum):
    """Profile role. Drives both row visibility and mutation rights."""

    ADMIN = "admin"
    HR = "hr"
    TEAM = "team"
    CLIENT = "client"

    @classmethod
    def parse(cls, value: object) -> Optional["Role"]:
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


STAFF_ROLES = frozenset({Role.ADMIN, Role.HR})
EMPLOYEE_ROLES = frozenset({Role.ADMIN, Role.HR, Role.TEAM})
SELF_SERVICE_ROLES = frozenset({Role.TEAM, Role.CLIENT})


class ProjectStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TaskStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    REVIEW = "review"
    COMPLETED = "completed"
    BLOCKED = "blocked"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class LeaveStatus(str, Enum):
    """Leave approval flow. APPROVED and REJECTED are terminal."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not LeaveStatus.PENDING


class LeaveType(str, Enum):
    ANNUAL = "annual"
    SICK = "sick"
    PERSONAL = "personal"
    UNPAID = "unpaid"
    OTHER = "other"


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    ON_LEAVE = "on_leave"
    TERMINATED = "terminated"
