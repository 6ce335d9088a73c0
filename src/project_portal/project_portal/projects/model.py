from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import ProjectStatus


@dataclass(frozen=True)
class Project:
    project_id: int
    name: str
    description: Optional[str]
    status: ProjectStatus
    client_company_id: Optional[int]
    start_date: Optional[date]
    deadline: Optional[date]
    budget: Optional[float]
    created_by: Optional[int]
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class ProjectMember:
    """Membership row. Its existence is what lets a team profile see the project."""

    project_id: int
    profile_id: int
    role: Optional[str] = None
    joined_at: Optional[datetime] = None
