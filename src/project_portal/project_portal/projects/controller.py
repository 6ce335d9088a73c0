from __future__ import annotations

from flask import Flask, request, url_for

from ..common.http import error_response, form_data, json_ok
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import DomainError
from .service import project_to_dict


def register(app: Flask, container: Container) -> None:
    guards = container.guards
    service = container.project_service

    @app.route("/projects", methods=["GET", "POST"], endpoint="projects")
    @guards.login_required
    def projects(caller):
        if request.method == "POST":
            data = form_data()
            try:
                project_id = service.create_project(
                    caller,
                    name=data.get("name", ""),
                    description=data.get("description", ""),
                    status=data.get("status") or "not_started",
                    client_company_id=data.get("client_company_id"),
                    start_date=data.get("start_date", ""),
                    deadline=data.get("deadline", ""),
                    budget=data.get("budget"),
                )
            except DomainError as e:
                return error_response(e)
            return json_ok(201, message="Project created", project_id=project_id)

        try:
            rows = service.list_projects(
                caller,
                status=request.args.get("status"),
                search=request.args.get("search"),
            )
        except DomainError as e:
            return error_response(e, empty="projects")
        return json_ok(projects=rows)

    @app.route("/projects/<int:project_id>", endpoint="project_detail")
    @guards.login_required
    def project_detail(caller, project_id: int):
        try:
            detail = service.get_detail(caller, project_id)
        except DomainError as e:
            return error_response(e, back=url_for("projects"))
        return json_ok(**detail)

    @app.route("/projects/<int:project_id>/delete", methods=["POST"], endpoint="delete_project")
    @guards.roles_required(Role.ADMIN)
    def delete_project(caller, project_id: int):
        try:
            service.delete_project(caller, project_id)
        except DomainError as e:
            return error_response(e, back=url_for("projects"))
        return json_ok(message="Project deleted")

    @app.route("/projects/<int:project_id>/status", methods=["POST"], endpoint="project_status")
    @guards.roles_required(Role.ADMIN, Role.TEAM)
    def project_status(caller, project_id: int):
        data = form_data()
        try:
            project = service.change_status(
                caller,
                project_id,
                status=data.get("status"),
                expected_status=data.get("expected_status"),
            )
        except DomainError as e:
            return error_response(e, back=url_for("projects"))
        return json_ok(message="Project status updated", project=project_to_dict(project))

    @app.route("/projects/<int:project_id>/members", methods=["POST"], endpoint="add_project_member")
    @guards.roles_required(Role.ADMIN)
    def add_project_member(caller, project_id: int):
        data = form_data()
        try:
            service.add_member(caller, project_id, profile_id=data.get("profile_id"), role=data.get("role", ""))
        except DomainError as e:
            return error_response(e, back=url_for("projects"))
        return json_ok(201, message="Member added")
