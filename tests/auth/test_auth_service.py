from __future__ import annotations

from dataclasses import replace
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from project_portal.auth.service import AuthService
from project_portal.clients.model import ClientCompany
from project_portal.core.enums import Role
from project_portal.core.exceptions import AuthenticationError, ValidationError
from project_portal.profiles.model import Profile


class InMemoryProfiles:
    def __init__(self, profiles):
        self.profiles = {p.profile_id: p for p in profiles}

    def get_by_id(self, profile_id: int) -> Optional[Profile]:
        return self.profiles.get(int(profile_id))

    def get_by_email(self, email: str) -> Optional[Profile]:
        return next((p for p in self.profiles.values() if p.email == email), None)

    def complete_profile(self, *, profile_id, full_name, role, job_title, department, phone, client_company_id):
        p = self.profiles[int(profile_id)]
        if p.profile_completed:
            return False
        self.profiles[p.profile_id] = replace(
            p,
            full_name=full_name,
            role=role.value,
            job_title=job_title,
            department=department,
            phone=phone,
            client_company_id=client_company_id,
            profile_completed=True,
        )
        return True


class InMemoryClients:
    def __init__(self):
        self.companies = {100: ClientCompany(company_id=100, name="Acme Corp")}

    def get_by_name(self, name):
        return next((c for c in self.companies.values() if c.name == name), None)

    def create(self, *, name, contact_name=None, contact_email=None, contact_phone=None, website=None):
        cid = max(self.companies) + 1
        self.companies[cid] = ClientCompany(company_id=cid, name=name, contact_name=contact_name, contact_email=contact_email)
        return cid


def _profile(profile_id, email, role, **kw):
    data = dict(
        profile_id=profile_id,
        email=email,
        full_name=email.split("@")[0].title(),
        password_hash=generate_password_hash("secret1"),
        role=role,
        profile_completed=True,
    )
    data.update(kw)
    return Profile(**data)


@pytest.fixture
def profiles():
    return InMemoryProfiles(
        [
            _profile(1, "admin@portal.local", "admin"),
            _profile(2, "ghost@portal.local", "admin", is_active=False),
            _profile(3, "odd@portal.local", "intern"),
            _profile(4, "new@portal.local", "team", full_name=None, profile_completed=False),
            _profile(5, "client@portal.local", "client", client_company_id=100),
            _profile(6, "broken@portal.local", "team", password_hash="CHANGE_ME"),
        ]
    )


@pytest.fixture
def clients():
    return InMemoryClients()


@pytest.fixture
def service(profiles, clients):
    return AuthService(profiles, clients)


def test_authenticate_success(service):
    user = service.authenticate("  Admin@Portal.local ", "secret1")

    assert user.user_id == 1
    assert user.role == Role.ADMIN
    assert user.profile_completed is True


@pytest.mark.parametrize(
    "email, password",
    [
        ("admin@portal.local", "wrong"),
        ("nobody@portal.local", "secret1"),
        ("ghost@portal.local", "secret1"),
        ("broken@portal.local", "secret1"),
        ("", ""),
    ],
)
def test_authenticate_failures(service, email, password):
    with pytest.raises(AuthenticationError):
        service.authenticate(email, password)


def test_resolve_caller_builds_context(service):
    caller = service.resolve_caller(5)

    assert caller.profile_id == 5
    assert caller.role == Role.CLIENT
    assert caller.client_company_id == 100


@pytest.mark.parametrize("profile_id", [None, 2, 3, 999])
def test_resolve_caller_rejects_unusable_sessions(service, profile_id):
    with pytest.raises(AuthenticationError):
        service.resolve_caller(profile_id)


def test_company_is_ignored_for_non_client_roles(profiles, service):
    profiles.profiles[1] = replace(profiles.profiles[1], client_company_id=100)

    assert service.resolve_caller(1).client_company_id is None


def test_complete_profile_as_team(service, profiles):
    caller = service.complete_profile(profile_id=4, full_name="Nova Park", role="team", job_title=" Dev ")

    assert caller.role == Role.TEAM
    stored = profiles.get_by_id(4)
    assert stored.profile_completed
    assert stored.job_title == "Dev"
    assert stored.client_company_id is None


def test_complete_profile_links_existing_company(service, profiles, clients):
    caller = service.complete_profile(profile_id=4, full_name="Nova Park", role="client", company_name="Acme Corp")

    assert caller.client_company_id == 100
    assert len(clients.companies) == 1


def test_complete_profile_creates_missing_company(service, profiles, clients):
    caller = service.complete_profile(profile_id=4, full_name="Nova Park", role="client", company_name="Initech")

    assert caller.client_company_id == 101
    assert clients.companies[101].contact_email == "new@portal.local"
    assert profiles.get_by_id(4).client_company_id == 101


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(full_name="Nova", role="admin"),
        dict(full_name="Nova", role="hr"),
        dict(full_name="Nova", role="boss"),
        dict(full_name=" ", role="team"),
        dict(full_name="Nova", role="client", company_name=""),
    ],
)
def test_complete_profile_validation(service, kwargs):
    with pytest.raises(ValidationError):
        service.complete_profile(profile_id=4, **kwargs)


def test_complete_profile_only_once(service):
    with pytest.raises(ValidationError):
        service.complete_profile(profile_id=1, full_name="Again", role="team")


def test_complete_profile_accepts_null_optional_fields(service, profiles):
    service.complete_profile(profile_id=4, full_name="Nova Park", role="team", job_title=None, department=None, phone=None)

    stored = profiles.get_by_id(4)
    assert stored.job_title is None
    assert stored.department is None
    assert stored.phone is None


def test_complete_profile_loses_race_to_another_completion(service, profiles):
    # the profile is read as incomplete, but another request completes it first
    stale = profiles.profiles[4]
    profiles.profiles[4] = replace(stale, profile_completed=True, full_name="First Writer")
    profiles.get_by_id = lambda profile_id: stale

    with pytest.raises(ValidationError):
        service.complete_profile(profile_id=4, full_name="Second Writer", role="team")

    assert profiles.profiles[4].full_name == "First Writer"
