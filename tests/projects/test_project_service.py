from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest

from project_portal.access.context import CallerContext
from project_portal.access.scopes import CompanyProjects, MemberProjects, NoRows, Unrestricted
from project_portal.clients.model import ClientCompany
from project_portal.core.enums import ProjectStatus, Role
from project_portal.core.exceptions import (
    AuthorizationError,
    NotFoundError,
    TransitionConflictError,
    ValidationError,
)
from project_portal.profiles.model import Profile
from project_portal.projects.model import Project
from project_portal.projects.service import ProjectService, completion_percent

ACME = 100


def _project(project_id, company=ACME, status=ProjectStatus.IN_PROGRESS):
    return Project(
        project_id=project_id,
        name=f"Project {project_id}",
        description=None,
        status=status,
        client_company_id=company,
        start_date=date(2024, 1, 1),
        deadline=None,
        budget=None,
        created_by=1,
    )


class InMemoryProjects:
    def __init__(self, projects, members):
        self.projects = {p.project_id: p for p in projects}
        self.members = set(members)
        self.list_calls = []

    def _allowed(self, p, scope):
        if isinstance(scope, Unrestricted):
            return True
        if isinstance(scope, NoRows):
            return False
        if isinstance(scope, MemberProjects):
            return (p.project_id, scope.profile_id) in self.members
        if isinstance(scope, CompanyProjects):
            return p.client_company_id == scope.company_id
        raise AssertionError(scope)

    def get(self, project_id):
        return self.projects.get(int(project_id))

    def get_visible(self, project_id, scope):
        p = self.projects.get(int(project_id))
        return p if p and self._allowed(p, scope) else None

    def list_view(self, *, scope, status=None, search=None, limit=200):
        self.list_calls.append((scope, status, search))
        return [
            {"project_id": p.project_id, "status": p.status.value}
            for p in self.projects.values()
            if self._allowed(p, scope) and (status is None or p.status == status)
        ]

    def list_options(self, *, scope):
        return [{"project_id": p.project_id, "name": p.name} for p in self.projects.values() if self._allowed(p, scope)]

    def is_member(self, project_id, profile_id):
        return (int(project_id), int(profile_id)) in self.members

    def create(self, *, name, description, status, client_company_id, start_date, deadline, budget, created_by):
        pid = max(self.projects, default=0) + 1
        self.projects[pid] = Project(
            project_id=pid,
            name=name,
            description=description,
            status=status,
            client_company_id=client_company_id,
            start_date=start_date,
            deadline=deadline,
            budget=budget,
            created_by=created_by,
        )
        return pid

    def update_status(self, *, project_id, expected, status):
        p = self.projects.get(int(project_id))
        if not p or p.status != expected:
            return False
        self.projects[p.project_id] = replace(p, status=status)
        return True

    def delete(self, project_id):
        return self.projects.pop(int(project_id), None) is not None

    def add_member(self, *, project_id, profile_id, role):
        key = (int(project_id), int(profile_id))
        if key in self.members:
            return False
        self.members.add(key)
        return True

    def list_members(self, project_id):
        return [{"profile_id": m} for p, m in sorted(self.members) if p == int(project_id)]


class InMemoryTasks:
    def __init__(self, rows):
        self.rows = rows

    def list_for_project(self, project_id):
        return [dict(r) for r in self.rows if r["project_id"] == int(project_id)]


class InMemoryDocuments:
    def list_for_project(self, project_id):
        return [{"document_id": 1, "project_id": int(project_id), "name": "sow.pdf"}]


class InMemoryClients:
    def get_by_id(self, company_id):
        if int(company_id) == ACME:
            return ClientCompany(company_id=ACME, name="Acme Corp")
        return None


class InMemoryProfiles:
    def __init__(self):
        self.profiles = {
            3: Profile(profile_id=3, email="t@x", full_name="T", password_hash="h", role="team", profile_completed=True),
            5: Profile(profile_id=5, email="c@x", full_name="C", password_hash="h", role="client", profile_completed=True),
            8: Profile(profile_id=8, email="m@x", full_name="M", password_hash="h", role="team", profile_completed=True),
        }

    def get_by_id(self, profile_id):
        return self.profiles.get(int(profile_id))


TASK_ROWS = [
    {"task_id": 1, "project_id": 10, "status": "completed", "due_date": date(2024, 3, 1)},
    {"task_id": 2, "project_id": 10, "status": "in_progress", "due_date": None},
    {"task_id": 3, "project_id": 10, "status": "not_started", "due_date": date(2024, 3, 7)},
]


@pytest.fixture
def projects():
    return InMemoryProjects(
        [_project(10), _project(11, company=200), _project(12, company=None)],
        members=[(10, 3), (11, 4)],
    )


@pytest.fixture
def service(projects, fixed_now):
    return ProjectService(
        projects,
        InMemoryTasks(TASK_ROWS),
        InMemoryDocuments(),
        InMemoryClients(),
        InMemoryProfiles(),
        clock=lambda: fixed_now,
    )


def test_completion_percent():
    assert completion_percent([]) == 0
    assert completion_percent(TASK_ROWS) == 33
    assert completion_percent([{"status": "completed"}, {"status": "review"}]) == 50


def test_list_is_scoped_per_role(service, admin, team, client_user):
    assert {r["project_id"] for r in service.list_projects(admin)} == {10, 11, 12}
    assert {r["project_id"] for r in service.list_projects(team)} == {10}
    assert {r["project_id"] for r in service.list_projects(client_user)} == {10}


def test_client_without_company_gets_empty_list_without_query(service, projects, orphan_client):
    assert service.list_projects(orphan_client) == []
    assert projects.list_calls == []


def test_status_filter_is_parsed(service, projects, admin):
    service.list_projects(admin, status="on_hold", search="  web ")

    scope, status, search = projects.list_calls[-1]
    assert status == ProjectStatus.ON_HOLD
    assert search == "web"


def test_invalid_status_filter(service, admin):
    with pytest.raises(ValidationError):
        service.list_projects(admin, status="archived")


def test_detail_for_member(service, team):
    detail = service.get_detail(team, 10)

    assert detail["project"]["project_id"] == 10
    assert detail["completion_percent"] == 33
    assert [t["due_label"] for t in detail["tasks"]] == ["Overdue (Mar 1)", "No due date", "Thursday"]
    assert detail["documents"][0]["name"] == "sow.pdf"
    assert detail["can_edit"] is True


def test_detail_of_foreign_project_is_not_found(service, team, client_user):
    with pytest.raises(NotFoundError):
        service.get_detail(team, 11)
    with pytest.raises(NotFoundError):
        service.get_detail(client_user, 11)
    with pytest.raises(NotFoundError):
        service.get_detail(team, 999)


def test_member_changes_status(service, projects, team):
    updated = service.change_status(team, 10, status="on_hold", expected_status="in_progress")

    assert updated.status == ProjectStatus.ON_HOLD
    assert projects.get(10).status == ProjectStatus.ON_HOLD


def test_any_status_value_is_allowed(service, admin):
    service.change_status(admin, 10, status="completed", expected_status="in_progress")
    updated = service.change_status(admin, 10, status="not_started", expected_status="completed")

    assert updated.status == ProjectStatus.NOT_STARTED


def test_stale_expected_status_conflicts(service, projects, admin, team):
    service.change_status(admin, 10, status="completed", expected_status="in_progress")

    with pytest.raises(TransitionConflictError) as exc:
        service.change_status(team, 10, status="on_hold", expected_status="in_progress")

    assert exc.value.current_status == "completed"
    assert projects.get(10).status == ProjectStatus.COMPLETED


def test_status_outside_enum_is_rejected(service, admin):
    with pytest.raises(ValidationError):
        service.change_status(admin, 10, status="archived", expected_status="in_progress")


def test_hr_and_client_cannot_edit_status(service, hr, client_user):
    with pytest.raises(AuthorizationError):
        service.change_status(hr, 10, status="on_hold", expected_status="in_progress")
    with pytest.raises(AuthorizationError):
        service.change_status(client_user, 10, status="on_hold", expected_status="in_progress")


def test_admin_creates_project(service, projects, admin):
    pid = service.create_project(admin, name="Portal", client_company_id=str(ACME), budget="1500.50")

    created = projects.get(pid)
    assert created.status == ProjectStatus.NOT_STARTED
    assert created.budget == 1500.5
    assert created.created_by == admin.profile_id


def test_create_validation(service, admin, team):
    with pytest.raises(AuthorizationError):
        service.create_project(team, name="Mine")
    with pytest.raises(ValidationError):
        service.create_project(admin, name="  ")
    with pytest.raises(ValidationError):
        service.create_project(admin, name="X", start_date="2024-02-01", deadline="2024-01-01")
    with pytest.raises(ValidationError):
        service.create_project(admin, name="X", client_company_id=999)
    with pytest.raises(ValidationError):
        service.create_project(admin, name="X", budget="-1")


def test_delete_project(service, projects, admin, team):
    with pytest.raises(AuthorizationError):
        service.delete_project(team, 10)

    service.delete_project(admin, 10)

    assert projects.get(10) is None
    with pytest.raises(NotFoundError):
        service.delete_project(admin, 10)


def test_add_member_grants_visibility(service, admin):
    newcomer = CallerContext(profile_id=8, role=Role.TEAM)
    assert service.list_projects(newcomer) == []

    service.add_member(admin, 11, profile_id="8", role="Reviewer")

    assert {r["project_id"] for r in service.list_projects(newcomer)} == {11}
    with pytest.raises(ValidationError):
        service.add_member(admin, 11, profile_id=8)


def test_add_member_rejects_clients(service, admin):
    with pytest.raises(ValidationError):
        service.add_member(admin, 10, profile_id=5)
