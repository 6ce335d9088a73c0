from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..access.context import CallerContext
from ..access.policy import can_edit_project, require_role, visibility_for
from ..access.scopes import Entity
from ..clients.repository import ClientRepository
from ..common.datetime_utils import now_local, parse_optional_date
from ..common.validators import optional_enum, optional_int, require_enum, require_non_empty
from ..core.enums import EMPLOYEE_ROLES, ProjectStatus, Role, TaskStatus
from ..core.exceptions import AuthorizationError, NotFoundError, TransitionConflictError, ValidationError
from ..documents.repository import DocumentRepository
from ..profiles.repository import ProfileRepository
from ..tasks.repository import TaskRepository
from ..tasks.service import with_due_labels
from .model import Project
from .repository import ProjectRepository

logger = logging.getLogger(__name__)


def completion_percent(tasks: Sequence[dict]) -> int:
    total = len(tasks)
    if total == 0:
        return 0
    completed = sum(1 for t in tasks if t.get("status") == TaskStatus.COMPLETED.value)
    return round(completed / total * 100)


def project_to_dict(p: Project) -> dict:
    return {
        "project_id": p.project_id,
        "name": p.name,
        "description": p.description or "",
        "status": p.status.value,
        "client_company_id": p.client_company_id,
        "start_date": p.start_date.strftime("%Y-%m-%d") if p.start_date else "",
        "deadline": p.deadline.strftime("%Y-%m-%d") if p.deadline else "",
        "budget": p.budget,
        "created_by": p.created_by,
    }


class ProjectService:
    def __init__(
        self,
        projects: ProjectRepository,
        tasks: TaskRepository,
        documents: DocumentRepository,
        clients: ClientRepository,
        profiles: ProfileRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._projects = projects
        self._tasks = tasks
        self._documents = documents
        self._clients = clients
        self._profiles = profiles
        self._clock = clock

    def list_projects(
        self,
        caller: CallerContext,
        *,
        status: object = None,
        search: Optional[str] = None,
    ) -> Sequence[dict]:
        scope = visibility_for(caller, Entity.PROJECT)
        if scope.matches_nothing:
            return []
        return self._projects.list_view(
            scope=scope,
            status=optional_enum(ProjectStatus, status, "Status"),
            search=(search or "").strip() or None,
        )

    def _get_visible(self, caller: CallerContext, project_id: int) -> Project:
        project = self._projects.get_visible(int(project_id), visibility_for(caller, Entity.PROJECT))
        if not project:
            raise NotFoundError("Project not found")
        return project

    def get_detail(self, caller: CallerContext, project_id: int) -> dict:
        """Project with its tasks, members, documents and completion percent.

        Invisible projects raise NotFoundError, same as missing ones.
        """

        project = self._get_visible(caller, project_id)
        tasks = with_due_labels(self._tasks.list_for_project(project.project_id), self._clock().date())
        is_member = caller.role == Role.TEAM and self._projects.is_member(project.project_id, caller.profile_id)

        return {
            "project": project_to_dict(project),
            "tasks": tasks,
            "members": list(self._projects.list_members(project.project_id)),
            "documents": list(self._documents.list_for_project(project.project_id)),
            "completion_percent": completion_percent(tasks),
            "can_edit": can_edit_project(caller, is_member=is_member),
        }

    def create_project(
        self,
        caller: CallerContext,
        *,
        name: str,
        description: str = "",
        status: object = ProjectStatus.NOT_STARTED.value,
        client_company_id: object = None,
        start_date: str = "",
        deadline: str = "",
        budget: object = None,
    ) -> int:
        require_role(caller, {Role.ADMIN}, "Only admins can create projects")

        name = require_non_empty(name, "Project name")
        try:
            start = parse_optional_date(start_date)
            end = parse_optional_date(deadline)
        except ValueError:
            raise ValidationError("Dates must be YYYY-MM-DD")
        if start and end and end < start:
            raise ValidationError("Deadline cannot be before the start date")

        company_id = optional_int(client_company_id, "Client")
        if company_id is not None and not self._clients.get_by_id(company_id):
            raise ValidationError("Client company does not exist")

        amount: Optional[float] = None
        if budget not in (None, ""):
            try:
                amount = float(budget)
            except (TypeError, ValueError):
                raise ValidationError("Budget must be a number")
            if amount < 0:
                raise ValidationError("Budget cannot be negative")

        project_id = self._projects.create(
            name=name,
            description=(description or "").strip() or None,
            status=require_enum(ProjectStatus, status, "Status"),
            client_company_id=company_id,
            start_date=start,
            deadline=end,
            budget=amount,
            created_by=caller.profile_id,
        )
        logger.info("profile=%s created project=%s", caller.profile_id, project_id)
        return project_id

    def change_status(
        self,
        caller: CallerContext,
        project_id: int,
        *,
        status: object,
        expected_status: object,
    ) -> Project:
        """Set any status value, provided the stored one is still ``expected_status``."""

        new_status = require_enum(ProjectStatus, status, "Status")
        expected = require_enum(ProjectStatus, expected_status, "Expected status")

        project = self._get_visible(caller, project_id)
        is_member = caller.role == Role.TEAM and self._projects.is_member(project.project_id, caller.profile_id)
        if not can_edit_project(caller, is_member=is_member):
            raise AuthorizationError("You do not have permission to edit this project")

        if not self._projects.update_status(project_id=project.project_id, expected=expected, status=new_status):
            current = self._projects.get(project.project_id)
            if not current:
                raise NotFoundError("Project not found")
            raise TransitionConflictError(
                f"Project status was changed to '{current.status.value}' by someone else",
                current_status=current.status.value,
            )

        logger.info(
            "profile=%s set project=%s status %s -> %s",
            caller.profile_id,
            project.project_id,
            expected.value,
            new_status.value,
        )
        updated = self._projects.get(project.project_id)
        if not updated:
            raise NotFoundError("Project not found")
        return updated

    def delete_project(self, caller: CallerContext, project_id: int) -> None:
        require_role(caller, {Role.ADMIN}, "Only admins can delete projects")
        if not self._projects.delete(int(project_id)):
            raise NotFoundError("Project not found")
        logger.info("profile=%s deleted project=%s", caller.profile_id, project_id)

    def add_member(self, caller: CallerContext, project_id: int, *, profile_id: object, role: str = "") -> None:
        require_role(caller, {Role.ADMIN}, "Only admins can add project members")

        project = self._projects.get(int(project_id))
        if not project:
            raise NotFoundError("Project not found")

        member_id = optional_int(profile_id, "Member")
        if member_id is None:
            raise ValidationError("Member is required")
        profile = self._profiles.get_by_id(member_id)
        if not profile or not profile.is_active:
            raise ValidationError("Member does not exist")
        if Role.parse(profile.role) not in EMPLOYEE_ROLES:
            raise ValidationError("Only employees can be project members")

        if not self._projects.add_member(
            project_id=project.project_id, profile_id=member_id, role=(role or "").strip() or None
        ):
            raise ValidationError("This person is already a member of the project")
        logger.info("profile=%s added member=%s to project=%s", caller.profile_id, member_id, project.project_id)
