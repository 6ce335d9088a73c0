from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..access.scopes import Scope
from ..core.enums import ProjectStatus
from .model import Project


class ProjectRepository(Protocol):
    def get(self, project_id: int) -> Optional[Project]:
        raise NotImplementedError

    def get_visible(self, project_id: int, scope: Scope) -> Optional[Project]:
        raise NotImplementedError

    def list_view(
        self,
        *,
        scope: Scope,
        status: Optional[ProjectStatus] = None,
        search: Optional[str] = None,
        limit: int = 200,
    ) -> Sequence[dict]:
        raise NotImplementedError

    def list_options(self, *, scope: Scope) -> Sequence[dict]:
        """``project_id``/``name`` pairs for pickers."""

        raise NotImplementedError

    def is_member(self, project_id: int, profile_id: int) -> bool:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        description: Optional[str],
        status: ProjectStatus,
        client_company_id: Optional[int],
        start_date: Optional[date],
        deadline: Optional[date],
        budget: Optional[float],
        created_by: int,
    ) -> int:
        raise NotImplementedError

    def update_status(self, *, project_id: int, expected: ProjectStatus, status: ProjectStatus) -> bool:
        """Compare-and-set. Returns False when the stored status is not ``expected``."""

        raise NotImplementedError

    def delete(self, project_id: int) -> bool:
        raise NotImplementedError

    def add_member(self, *, project_id: int, profile_id: int, role: Optional[str]) -> bool:
        """Returns False when the profile is already a member."""

        raise NotImplementedError

    def list_members(self, project_id: int) -> Sequence[dict]:
        raise NotImplementedError
