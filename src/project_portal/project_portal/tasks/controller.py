from __future__ import annotations

from flask import Flask, request, url_for

from ..common.http import error_response, form_data, json_ok
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    guards = container.guards
    service = container.task_service

    @app.route("/tasks", methods=["GET", "POST"], endpoint="tasks")
    @guards.login_required
    def tasks(caller):
        if request.method == "POST":
            data = form_data()
            try:
                task_id = service.create_task(
                    caller,
                    project_id=data.get("project_id"),
                    title=data.get("title", ""),
                    description=data.get("description", ""),
                    assignee_id=data.get("assignee_id"),
                    priority=data.get("priority") or "medium",
                    status=data.get("status") or "not_started",
                    due_date=data.get("due_date", ""),
                )
            except DomainError as e:
                return error_response(e, back=url_for("tasks"))
            return json_ok(201, message="Task created", task_id=task_id)

        try:
            rows = service.list_tasks(
                caller,
                status=request.args.get("status"),
                project_id=request.args.get("project_id"),
                search=request.args.get("search"),
            )
            options = service.list_project_options(caller)
        except DomainError as e:
            return error_response(e, empty="tasks")
        return json_ok(tasks=rows, projects=options)

    @app.route("/tasks/<int:task_id>/status", methods=["POST"], endpoint="task_status")
    @guards.roles_required(Role.ADMIN, Role.TEAM)
    def task_status(caller, task_id: int):
        data = form_data()
        try:
            task = service.change_status(
                caller,
                task_id,
                status=data.get("status"),
                expected_status=data.get("expected_status"),
            )
        except DomainError as e:
            return error_response(e, back=url_for("tasks"))
        return json_ok(
            message="Task status updated",
            task={"task_id": task.task_id, "project_id": task.project_id, "status": task.status.value},
        )
