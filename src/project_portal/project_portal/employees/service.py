from __future__ import annotations

from typing import Optional, Sequence

from ..access.context import CallerContext
from ..access.policy import visibility_for
from ..access.scopes import Entity
from ..common.validators import optional_enum, optional_int
from ..core.enums import EmployeeStatus
from .department_model import Department
from .repository import EmployeeRepository


class EmployeeService:
    """HR directory. Admin and HR only; other roles are sent away."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def list_employees(
        self,
        caller: CallerContext,
        *,
        department_id: object = None,
        status: object = None,
        search: Optional[str] = None,
    ) -> Sequence[dict]:
        visibility_for(caller, Entity.EMPLOYEE)
        return self._employees.list_view(
            department_id=optional_int(department_id, "Department"),
            status=optional_enum(EmployeeStatus, status, "Status"),
            search=(search or "").strip() or None,
        )

    def list_departments(self, caller: CallerContext) -> Sequence[Department]:
        visibility_for(caller, Entity.DEPARTMENT)
        return self._employees.list_departments()
