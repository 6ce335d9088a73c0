from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Callable, Iterable, List, Optional, Sequence

from ..access.context import CallerContext
from ..access.policy import can_edit_task, visibility_for
from ..access.scopes import Entity
from ..common.datetime_utils import format_date, now_local, parse_optional_date
from ..common.validators import optional_enum, optional_int, require_enum, require_non_empty
from ..core.constants import DUE_SOON_WINDOW_DAYS
from ..core.enums import EMPLOYEE_ROLES, Role, TaskPriority, TaskStatus
from ..core.exceptions import AuthorizationError, NotFoundError, TransitionConflictError, ValidationError
from ..profiles.repository import ProfileRepository
from ..projects.repository import ProjectRepository
from .model import Task
from .repository import TaskRepository

logger = logging.getLogger(__name__)


def _month_day(d: date) -> str:
    return f"{d.strftime('%b')} {d.day}"


def due_label(due_date: Optional[date], today: date) -> str:
    """Human label for a task due date relative to ``today``."""

    if due_date is None:
        return "No due date"
    if due_date < today:
        return f"Overdue ({_month_day(due_date)})"
    if due_date == today:
        return "Today"
    if due_date == today + timedelta(days=1):
        return "Tomorrow"
    if due_date < today + timedelta(days=DUE_SOON_WINDOW_DAYS):
        return due_date.strftime("%A")
    return _month_day(due_date)


def with_due_labels(rows: Iterable[dict], today: date) -> List[dict]:
    out: List[dict] = []
    for r in rows:
        row = dict(r)
        due = row.get("due_date")
        row["due_label"] = due_label(due, today)
        row["due_date"] = format_date(due)
        out.append(row)
    return out


class TaskService:
    def __init__(
        self,
        tasks: TaskRepository,
        projects: ProjectRepository,
        profiles: ProfileRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._tasks = tasks
        self._projects = projects
        self._profiles = profiles
        self._clock = clock

    def list_tasks(
        self,
        caller: CallerContext,
        *,
        status: object = None,
        project_id: object = None,
        search: Optional[str] = None,
    ) -> Sequence[dict]:
        scope = visibility_for(caller, Entity.TASK)
        if scope.matches_nothing:
            return []

        rows = self._tasks.list_view(
            scope=scope,
            status=optional_enum(TaskStatus, status, "Status"),
            project_id=optional_int(project_id, "Project"),
            search=(search or "").strip() or None,
        )
        return with_due_labels(rows, self._clock().date())

    def list_project_options(self, caller: CallerContext) -> Sequence[dict]:
        scope = visibility_for(caller, Entity.PROJECT)
        if scope.matches_nothing:
            return []
        return self._projects.list_options(scope=scope)

    def create_task(
        self,
        caller: CallerContext,
        *,
        project_id: object,
        title: str,
        description: str = "",
        assignee_id: object = None,
        priority: object = TaskPriority.MEDIUM.value,
        status: object = TaskStatus.NOT_STARTED.value,
        due_date: str = "",
    ) -> int:
        if caller.role not in (Role.ADMIN, Role.TEAM):
            raise AuthorizationError("You do not have permission to add tasks")

        pid = optional_int(project_id, "Project")
        if pid is None:
            raise ValidationError("Project is required")

        project = self._projects.get_visible(pid, visibility_for(caller, Entity.PROJECT))
        if not project:
            raise NotFoundError("Project not found")
        if caller.role == Role.TEAM and not self._projects.is_member(pid, caller.profile_id):
            raise AuthorizationError("Only project members can add tasks")

        title = require_non_empty(title, "Title")
        try:
            due = parse_optional_date(due_date)
        except ValueError:
            raise ValidationError("Due date must be a date (YYYY-MM-DD)")

        task_id = self._tasks.create(
            project_id=pid,
            title=title,
            description=(description or "").strip() or None,
            assignee_id=self._check_assignee(pid, assignee_id),
            status=require_enum(TaskStatus, status, "Status"),
            priority=require_enum(TaskPriority, priority, "Priority"),
            due_date=due,
            created_by=caller.profile_id,
        )
        logger.info("profile=%s created task=%s in project=%s", caller.profile_id, task_id, pid)
        return task_id

    def _check_assignee(self, project_id: int, assignee_id: object) -> Optional[int]:
        """Assignees are active employees who belong to the project."""

        member_id = optional_int(assignee_id, "Assignee")
        if member_id is None:
            return None
        profile = self._profiles.get_by_id(member_id)
        if not profile or not profile.is_active:
            raise ValidationError("Assignee does not exist")
        if Role.parse(profile.role) not in EMPLOYEE_ROLES:
            raise ValidationError("Only employees can be assigned tasks")
        if not self._projects.is_member(project_id, member_id):
            raise ValidationError("Assignee must be a member of the project")
        return member_id

    def change_status(self, caller: CallerContext, task_id: int, *, status: object, expected_status: object) -> Task:
        """Set any status value, provided the stored one is still ``expected_status``."""

        new_status = require_enum(TaskStatus, status, "Status")
        expected = require_enum(TaskStatus, expected_status, "Expected status")

        task = self._tasks.get_visible(int(task_id), visibility_for(caller, Entity.TASK))
        if not task:
            raise NotFoundError("Task not found")

        is_member = caller.role == Role.TEAM and self._projects.is_member(task.project_id, caller.profile_id)
        if not can_edit_task(caller, assignee_id=task.assignee_id, is_member=is_member):
            raise AuthorizationError("You do not have permission to edit this task")

        if not self._tasks.update_status(task_id=task.task_id, expected=expected, status=new_status):
            current = self._tasks.get(task.task_id)
            if not current:
                raise NotFoundError("Task not found")
            raise TransitionConflictError(
                f"Task status was changed to '{current.status.value}' by someone else",
                current_status=current.status.value,
            )

        logger.info(
            "profile=%s set task=%s status %s -> %s", caller.profile_id, task.task_id, expected.value, new_status.value
        )
        updated = self._tasks.get(task.task_id)
        if not updated:
            raise NotFoundError("Task not found")
        return updated
