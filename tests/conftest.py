from __future__ import annotations

from datetime import datetime

import pytest

from project_portal.access.context import CallerContext
from project_portal.core.enums import Role

ADMIN_ID = 1
HR_ID = 2
TEAM_ID = 3
OTHER_TEAM_ID = 4
CLIENT_ID = 5
ACME_ID = 100


@pytest.fixture
def admin() -> CallerContext:
    return CallerContext(profile_id=ADMIN_ID, role=Role.ADMIN, full_name="Avery Admin")


@pytest.fixture
def hr() -> CallerContext:
    return CallerContext(profile_id=HR_ID, role=Role.HR, full_name="Harper Reyes")


@pytest.fixture
def team() -> CallerContext:
    return CallerContext(profile_id=TEAM_ID, role=Role.TEAM, full_name="Taylor Nguyen")


@pytest.fixture
def client_user() -> CallerContext:
    return CallerContext(profile_id=CLIENT_ID, role=Role.CLIENT, client_company_id=ACME_ID, full_name="Casey Client")


@pytest.fixture
def orphan_client() -> CallerContext:
    return CallerContext(profile_id=CLIENT_ID + 1, role=Role.CLIENT, client_company_id=None, full_name="No Company")


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 3, 4, 9, 30)
