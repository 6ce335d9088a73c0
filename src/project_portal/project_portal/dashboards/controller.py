from __future__ import annotations

from flask import Flask, redirect, url_for

from ..common.http import error_response, json_ok
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    guards = container.guards
    service = container.dashboard_service

    @app.route("/dashboard", endpoint="dashboard")
    @guards.login_required
    def dashboard(caller):
        return redirect(url_for(f"dashboard_{caller.role.value}"))

    @app.route("/dashboard/admin", endpoint="dashboard_admin")
    @guards.roles_required(Role.ADMIN)
    def dashboard_admin(caller):
        try:
            data = service.admin(caller)
        except DomainError as e:
            return error_response(e)
        return json_ok(role=caller.role.value, name=caller.full_name, **data)

    @app.route("/dashboard/hr", endpoint="dashboard_hr")
    @guards.roles_required(Role.HR)
    def dashboard_hr(caller):
        try:
            data = service.hr(caller)
        except DomainError as e:
            return error_response(e)
        return json_ok(role=caller.role.value, name=caller.full_name, **data)

    @app.route("/dashboard/team", endpoint="dashboard_team")
    @guards.roles_required(Role.TEAM)
    def dashboard_team(caller):
        try:
            data = service.team(caller)
        except DomainError as e:
            return error_response(e)
        return json_ok(role=caller.role.value, name=caller.full_name, **data)

    @app.route("/dashboard/client", endpoint="dashboard_client")
    @guards.roles_required(Role.CLIENT)
    def dashboard_client(caller):
        try:
            data = service.client(caller)
        except DomainError as e:
            return error_response(e)
        return json_ok(role=caller.role.value, name=caller.full_name, **data)
