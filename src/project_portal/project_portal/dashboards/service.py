from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, Dict, Mapping, Type

from ..access.context import CallerContext
from ..access.policy import require_role
from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_RECENT_LIMIT, NEW_HIRE_WINDOW_DAYS
from ..core.enums import ProjectStatus, Role, TaskStatus
from ..tasks.service import with_due_labels
from .repository import DashboardRepository


def fill_distribution(enum_cls: Type[Enum], raw: Mapping[str, int]) -> Dict[str, int]:
    """Every status of ``enum_cls`` in declaration order, zero when absent."""

    return {m.value: int(raw.get(m.value, 0)) for m in enum_cls}


class DashboardService:
    def __init__(self, dashboards: DashboardRepository, *, clock: Callable[[], datetime] = now_local):
        self._dashboards = dashboards
        self._clock = clock

    def admin(self, caller: CallerContext) -> dict:
        require_role(caller, {Role.ADMIN})
        data = self._dashboards.admin_summary(recent_limit=DEFAULT_RECENT_LIMIT)
        return {
            "counts": data["counts"],
            "recent_projects": data["recent_projects"],
            "recent_tasks": with_due_labels(data["recent_tasks"], self._clock().date()),
            "project_status": fill_distribution(ProjectStatus, data["project_status"]),
        }

    def hr(self, caller: CallerContext) -> dict:
        require_role(caller, {Role.HR})
        since = self._clock().date() - timedelta(days=NEW_HIRE_WINDOW_DAYS)
        data = self._dashboards.hr_summary(hired_since=since, recent_limit=DEFAULT_RECENT_LIMIT)
        return {
            "counts": data["counts"],
            "recent_employees": data["recent_employees"],
            "recent_leave_requests": data["recent_leave_requests"],
        }

    def team(self, caller: CallerContext) -> dict:
        require_role(caller, {Role.TEAM})
        data = self._dashboards.team_summary(profile_id=caller.profile_id, recent_limit=DEFAULT_RECENT_LIMIT)
        return {
            "counts": data["counts"],
            "upcoming_tasks": with_due_labels(data["upcoming_tasks"], self._clock().date()),
            "projects": data["projects"],
            "task_status": fill_distribution(TaskStatus, data["task_status"]),
        }

    def client(self, caller: CallerContext) -> dict:
        require_role(caller, {Role.CLIENT})
        if caller.client_company_id is None:
            return {
                "counts": {
                    "projects": 0,
                    "projects_in_progress": 0,
                    "projects_completed": 0,
                    "invoices": 0,
                    "documents": 0,
                },
                "recent_projects": [],
                "recent_invoices": [],
                "recent_documents": [],
                "project_status": fill_distribution(ProjectStatus, {}),
            }

        data = self._dashboards.client_summary(
            company_id=caller.client_company_id, recent_limit=DEFAULT_RECENT_LIMIT
        )
        return {
            "counts": data["counts"],
            "recent_projects": data["recent_projects"],
            "recent_invoices": data["recent_invoices"],
            "recent_documents": data["recent_documents"],
            "project_status": fill_distribution(ProjectStatus, data["project_status"]),
        }
