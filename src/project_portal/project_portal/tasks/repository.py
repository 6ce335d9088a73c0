from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..access.scopes import Scope
from ..core.enums import TaskPriority, TaskStatus
from .model import Task


class TaskRepository(Protocol):
    """Listing rows keep ``due_date`` as a ``date`` so the service can label it."""

    def get(self, task_id: int) -> Optional[Task]:
        raise NotImplementedError

    def get_visible(self, task_id: int, scope: Scope) -> Optional[Task]:
        raise NotImplementedError

    def list_view(
        self,
        *,
        scope: Scope,
        status: Optional[TaskStatus] = None,
        project_id: Optional[int] = None,
        search: Optional[str] = None,
        limit: int = 200,
    ) -> Sequence[dict]:
        raise NotImplementedError

    def list_for_project(self, project_id: int) -> Sequence[dict]:
        raise NotImplementedError

    def create(
        self,
        *,
        project_id: int,
        title: str,
        description: Optional[str],
        assignee_id: Optional[int],
        status: TaskStatus,
        priority: TaskPriority,
        due_date: Optional[date],
        created_by: int,
    ) -> int:
        raise NotImplementedError

    def update_status(self, *, task_id: int, expected: TaskStatus, status: TaskStatus) -> bool:
        """Compare-and-set. Returns False when the stored status is not ``expected``."""

        raise NotImplementedError
