from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime

import pytest
from werkzeug.security import generate_password_hash

from project_portal.access.scopes import NoRows
from project_portal.auth.guards import Guards
from project_portal.auth.service import AuthService
from project_portal.clients.service import ClientService
from project_portal.container import Container
from project_portal.core.enums import LeaveStatus, LeaveType
from project_portal.core.exceptions import StoreError
from project_portal.dashboards.service import DashboardService
from project_portal.documents.service import DocumentService
from project_portal.employees.service import EmployeeService
from project_portal.invoices.service import InvoiceService
from project_portal.leaves.model import LeaveRequest
from project_portal.leaves.service import LeaveService
from project_portal.main import create_app
from project_portal.profiles.model import Profile
from project_portal.projects.service import ProjectService
from project_portal.tasks.service import TaskService

PASSWORD = "secret1"


def _profile(profile_id, email, role, **kw):
    data = dict(
        profile_id=profile_id,
        email=email,
        full_name=email.split("@")[0].title(),
        password_hash=generate_password_hash(PASSWORD),
        role=role,
        profile_completed=True,
    )
    data.update(kw)
    return Profile(**data)


class InMemoryProfiles:
    def __init__(self):
        self.profiles = {
            p.profile_id: p
            for p in [
                _profile(1, "admin@portal.local", "admin"),
                _profile(2, "hr@portal.local", "hr"),
                _profile(3, "team@portal.local", "team"),
                _profile(5, "client@portal.local", "client", client_company_id=100),
                _profile(6, "orphan@portal.local", "client"),
                _profile(7, "new@portal.local", "team", profile_completed=False),
            ]
        }

    def get_by_id(self, profile_id):
        return self.profiles.get(int(profile_id))

    def get_by_email(self, email):
        return next((p for p in self.profiles.values() if p.email == email), None)

    def complete_profile(self, *, profile_id, full_name, role, job_title, department, phone, client_company_id):
        p = self.profiles[int(profile_id)]
        if p.profile_completed:
            return False
        self.profiles[p.profile_id] = replace(
            p, full_name=full_name, role=role.value, client_company_id=client_company_id, profile_completed=True
        )
        return True


class InMemoryClients:
    def get_by_id(self, company_id):
        return None

    def get_by_name(self, name):
        return None

    def create(self, **kwargs):
        return 101

    def list_view(self, *, search=None, limit=200):
        return [{"company_id": 100, "name": "Acme Corp", "project_count": 1, "contact_count": 1}]


class InMemoryProjects:
    def __init__(self, fail=False):
        self.fail = fail
        self.list_calls = 0

    def list_view(self, *, scope, status=None, search=None, limit=200):
        self.list_calls += 1
        if self.fail:
            raise StoreError("Database query failed")
        return [{"project_id": 10, "name": "Website Redesign", "status": "in_progress"}]

    def get_visible(self, project_id, scope):
        return None

    def list_options(self, *, scope):
        return []


class InMemoryTasks:
    def list_view(self, **kwargs):
        return [{"task_id": 1, "project_id": 10, "status": "review", "due_date": None}]


class InMemoryLeaves:
    def __init__(self):
        self.rows = {
            1: LeaveRequest(
                request_id=1,
                user_id=3,
                leave_type=LeaveType.ANNUAL,
                start_date=date(2024, 1, 1),
                end_date=date(2024, 1, 5),
                reason="Family trip",
                status=LeaveStatus.PENDING,
            )
        }

    def create(self, *, user_id, leave_type, start_date, end_date, reason):
        rid = max(self.rows) + 1
        self.rows[rid] = LeaveRequest(rid, int(user_id), leave_type, start_date, end_date, reason, LeaveStatus.PENDING)
        return rid

    def get(self, request_id):
        return self.rows.get(int(request_id))

    def decide(self, *, request_id, status, reviewed_by):
        req = self.rows.get(int(request_id))
        if not req or req.status != LeaveStatus.PENDING:
            return False
        self.rows[req.request_id] = replace(req, status=status, reviewed_by=reviewed_by, reviewed_at=datetime(2024, 1, 2))
        return True

    def list_view(self, *, status=None, user_id=None, search=None, limit=200):
        return [{"request_id": r.request_id, "user_id": r.user_id} for r in self.rows.values()]


class InMemoryRows:
    """Invoices, documents and employees: fixed rows, NoRows honored."""

    def list_view(self, *, scope=None, **kwargs):
        if isinstance(scope, NoRows):
            raise AssertionError("NoRows must not reach the repository")
        return [{"id": 1}]

    def list_departments(self):
        return []


class InMemoryDashboards:
    def team_summary(self, *, profile_id, recent_limit=5):
        return {
            "counts": {"assigned_tasks": 1, "completed_tasks": 0, "projects": 1},
            "upcoming_tasks": [],
            "projects": [],
            "task_status": {},
        }


def _container(projects=None):
    profiles = InMemoryProfiles()
    clients = InMemoryClients()
    projects = projects or InMemoryProjects()
    tasks = InMemoryTasks()
    rows = InMemoryRows()
    auth_service = AuthService(profiles, clients)
    return Container(
        conn=None,
        auth_service=auth_service,
        guards=Guards(auth_service),
        project_service=ProjectService(projects, tasks, rows, clients, profiles),
        task_service=TaskService(tasks, projects, profiles),
        leave_service=LeaveService(InMemoryLeaves()),
        client_service=ClientService(clients),
        invoice_service=InvoiceService(rows),
        document_service=DocumentService(rows),
        employee_service=EmployeeService(rows),
        dashboard_service=DashboardService(InMemoryDashboards()),
    )


@pytest.fixture
def make_client(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")

    def _make(container=None):
        app = create_app(container=container or _container())
        return app.test_client()

    return _make


@pytest.fixture
def http(make_client):
    return make_client()


def _sign_in(http, profile_id, completed=True):
    with http.session_transaction() as s:
        s["user_id"] = profile_id
        s["profile_completed"] = completed


def test_protected_route_without_session_redirects_to_login(http):
    resp = http.get("/projects")

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/login")


def test_login_with_bad_password_is_401(http):
    resp = http.post("/login", json={"email": "admin@portal.local", "password": "nope"})

    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_login_then_dashboard_redirects_by_role(http):
    resp = http.post("/login", json={"email": "team@portal.local", "password": PASSWORD})
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/dashboard")

    resp = http.get("/dashboard")
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/dashboard/team")

    body = http.get("/dashboard/team").get_json()
    assert body["success"] is True
    assert body["counts"]["assigned_tasks"] == 1
    assert body["task_status"]["blocked"] == 0


def test_incomplete_profile_is_sent_to_completion(http):
    resp = http.post("/login", data={"email": "new@portal.local", "password": PASSWORD})
    assert resp.headers["Location"].endswith("/auth/complete-profile")

    resp = http.get("/projects")
    assert resp.headers["Location"].endswith("/auth/complete-profile")

    resp = http.post("/auth/complete-profile", json={"full_name": "Nova Park", "role": "team"})
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/dashboard")

    assert http.get("/projects").status_code == 200


def test_complete_profile_rejects_admin_role(http):
    _sign_in(http, 7, completed=False)

    resp = http.post("/auth/complete-profile", json={"full_name": "Nova", "role": "admin"})

    assert resp.status_code == 400


def test_wrong_role_is_sent_to_dashboard(http):
    _sign_in(http, 3)

    for path in ("/hr/employees", "/hr/leave-requests", "/clients", "/dashboard/admin"):
        resp = http.get(path)
        assert resp.status_code == 302, path
        assert resp.headers["Location"].endswith("/dashboard"), path


def test_unknown_profile_clears_session(http):
    _sign_in(http, 999)

    resp = http.get("/projects")

    assert resp.headers["Location"].endswith("/login")
    with http.session_transaction() as s:
        assert "user_id" not in s


def test_approve_then_conflict(http):
    _sign_in(http, 2)

    first = http.post("/hr/leave-requests/1/approve")
    assert first.status_code == 200
    body = first.get_json()
    assert body["leave_request"]["status"] == "approved"
    assert body["leave_request"]["reviewed_by"] == 2
    assert body["leave_request"]["duration_days"] == 5

    second = http.post("/hr/leave-requests/1/reject")
    assert second.status_code == 409
    assert second.get_json()["current_status"] == "approved"


def test_approve_missing_request_is_404_with_back_link(http):
    _sign_in(http, 1)

    resp = http.post("/hr/leave-requests/42/approve")

    assert resp.status_code == 404
    assert resp.get_json()["back"].endswith("/hr/leave-requests")


def test_submit_leave_validation(http):
    _sign_in(http, 3)

    bad = http.post("/leave-requests", json={"leave_type": "annual", "start_date": "2024-01-05", "end_date": "2024-01-01"})
    assert bad.status_code == 400

    ok = http.post("/leave-requests", json={"leave_type": "sick", "start_date": "2024-02-01", "end_date": "2024-02-02"})
    assert ok.status_code == 201
    assert ok.get_json()["leave_request"]["status"] == "pending"


def test_orphan_client_sees_empty_lists(http):
    _sign_in(http, 6)

    for path, key in (("/projects", "projects"), ("/tasks", "tasks"), ("/invoices", "invoices"), ("/documents", "documents")):
        resp = http.get(path)
        assert resp.status_code == 200, path
        assert resp.get_json()[key] == [], path


def test_project_detail_not_visible_is_404(http):
    _sign_in(http, 3)

    resp = http.get("/projects/10")

    assert resp.status_code == 404
    assert resp.get_json()["back"].endswith("/projects")


def test_task_list_has_labels(http):
    _sign_in(http, 1)

    body = http.get("/tasks").get_json()

    assert body["tasks"][0]["due_label"] == "No due date"


def test_store_failure_degrades_to_empty_list(make_client):
    http = make_client(_container(projects=InMemoryProjects(fail=True)))
    _sign_in(http, 1)

    resp = http.get("/projects")

    assert resp.status_code == 503
    body = resp.get_json()
    assert body["success"] is False
    assert body["projects"] == []


def test_unknown_route_is_json_404(http):
    resp = http.get("/nope")

    assert resp.status_code == 404
    assert resp.get_json()["success"] is False


def test_complete_profile_with_null_optional_fields(http):
    _sign_in(http, 7, completed=False)

    resp = http.post(
        "/auth/complete-profile",
        json={"full_name": "Nova Park", "role": "team", "job_title": None, "department": None, "phone": None},
    )

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/dashboard")


def test_create_client_with_null_contact_fields(http):
    _sign_in(http, 1)

    resp = http.post("/clients", json={"name": "Initech", "contact_name": None, "website": None})

    assert resp.status_code == 201
    assert resp.get_json()["company_id"] == 101


@pytest.mark.parametrize(
    "remember_me, permanent",
    [("false", False), ("0", False), ("", False), ("on", True), ("true", True), (True, True)],
)
def test_remember_me_is_parsed(http, remember_me, permanent):
    resp = http.post(
        "/login", json={"email": "admin@portal.local", "password": PASSWORD, "remember_me": remember_me}
    )
    assert resp.status_code == 302

    with http.session_transaction() as s:
        assert s.permanent is permanent
