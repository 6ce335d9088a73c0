from __future__ import annotations

import pytest

from project_portal.clients.model import ClientCompany
from project_portal.clients.service import ClientService
from project_portal.core.exceptions import AuthorizationError, ValidationError


class InMemoryClients:
    def __init__(self):
        self.companies = {100: ClientCompany(company_id=100, name="Acme Corp")}
        self.searches = []

    def get_by_id(self, company_id):
        return self.companies.get(company_id)

    def get_by_name(self, name):
        return next((c for c in self.companies.values() if c.name.lower() == name.lower()), None)

    def create(self, *, name, contact_name=None, contact_email=None, contact_phone=None, website=None):
        cid = max(self.companies) + 1
        self.companies[cid] = ClientCompany(
            company_id=cid,
            name=name,
            contact_name=contact_name,
            contact_email=contact_email,
            contact_phone=contact_phone,
            website=website,
        )
        return cid

    def list_view(self, *, search=None, limit=200):
        self.searches.append(search)
        return [{"company_id": c.company_id, "name": c.name} for c in self.companies.values()]


def test_staff_list_clients(admin, hr):
    repo = InMemoryClients()
    service = ClientService(repo)

    assert len(service.list_clients(admin)) == 1
    service.list_clients(hr, search="  acme ")

    assert repo.searches == [None, "acme"]


@pytest.mark.parametrize("caller_name", ["team", "client_user"])
def test_non_staff_cannot_list_clients(caller_name, request):
    caller = request.getfixturevalue(caller_name)

    with pytest.raises(AuthorizationError):
        ClientService(InMemoryClients()).list_clients(caller)


def test_admin_creates_client_with_blank_fields_as_none(admin):
    repo = InMemoryClients()

    cid = ClientService(repo).create_client(admin, name=" Globex Ltd ", contact_email="ops@globex.test")

    created = repo.companies[cid]
    assert created.name == "Globex Ltd"
    assert created.contact_email == "ops@globex.test"
    assert created.contact_name is None


def test_duplicate_client_name_rejected(admin):
    with pytest.raises(ValidationError):
        ClientService(InMemoryClients()).create_client(admin, name="acme corp")


def test_hr_cannot_create_client(hr):
    with pytest.raises(AuthorizationError):
        ClientService(InMemoryClients()).create_client(hr, name="Initech")


def test_null_contact_fields_are_stored_as_none(admin):
    repo = InMemoryClients()

    cid = ClientService(repo).create_client(
        admin, name="Initech", contact_name=None, contact_email=None, contact_phone=None, website=None
    )

    created = repo.companies[cid]
    assert created.contact_name is None
    assert created.website is None
