from __future__ import annotations

from dataclasses import asdict

from flask import Flask, request

from ..common.http import error_response, json_ok
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    guards = container.guards
    service = container.employee_service

    @app.route("/hr/employees", endpoint="hr_employees")
    @guards.roles_required(Role.ADMIN, Role.HR)
    def hr_employees(caller):
        try:
            rows = service.list_employees(
                caller,
                department_id=request.args.get("department_id"),
                status=request.args.get("status"),
                search=request.args.get("search"),
            )
        except DomainError as e:
            return error_response(e, empty="employees")
        return json_ok(employees=rows)

    @app.route("/hr/departments", endpoint="hr_departments")
    @guards.roles_required(Role.ADMIN, Role.HR)
    def hr_departments(caller):
        try:
            departments = service.list_departments(caller)
        except DomainError as e:
            return error_response(e, empty="departments")
        return json_ok(departments=[asdict(d) for d in departments])
