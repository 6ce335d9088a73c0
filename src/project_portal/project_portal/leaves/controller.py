from __future__ import annotations

from flask import Flask, request, url_for

from ..common.http import error_response, form_data, json_ok
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import DomainError
from .service import leave_to_dict


def register(app: Flask, container: Container) -> None:
    guards = container.guards
    service = container.leave_service

    @app.route("/hr/leave-requests", endpoint="hr_leave_requests")
    @guards.roles_required(Role.ADMIN, Role.HR)
    def hr_leave_requests(caller):
        try:
            rows = service.list_for_review(
                caller,
                status=request.args.get("status"),
                search=request.args.get("search"),
            )
        except DomainError as e:
            return error_response(e, empty="leave_requests")
        return json_ok(leave_requests=rows)

    @app.route("/hr/leave-requests/<int:request_id>/approve", methods=["POST"], endpoint="approve_leave")
    @guards.roles_required(Role.ADMIN, Role.HR)
    def approve_leave(caller, request_id: int):
        try:
            decided = service.approve(caller, request_id)
        except DomainError as e:
            return error_response(e, back=url_for("hr_leave_requests"))
        return json_ok(message="Leave request approved", leave_request=leave_to_dict(decided))

    @app.route("/hr/leave-requests/<int:request_id>/reject", methods=["POST"], endpoint="reject_leave")
    @guards.roles_required(Role.ADMIN, Role.HR)
    def reject_leave(caller, request_id: int):
        try:
            decided = service.reject(caller, request_id)
        except DomainError as e:
            return error_response(e, back=url_for("hr_leave_requests"))
        return json_ok(message="Leave request rejected", leave_request=leave_to_dict(decided))

    @app.route("/leave-requests", methods=["GET", "POST"], endpoint="my_leave_requests")
    @guards.roles_required(Role.ADMIN, Role.HR, Role.TEAM)
    def my_leave_requests(caller):
        if request.method == "POST":
            data = form_data()
            try:
                created = service.submit(
                    caller,
                    leave_type=data.get("leave_type"),
                    start_date=data.get("start_date", ""),
                    end_date=data.get("end_date", ""),
                    reason=data.get("reason", ""),
                    user_id=data.get("user_id"),
                )
            except DomainError as e:
                return error_response(e)
            return json_ok(201, message="Leave request submitted", leave_request=leave_to_dict(created))

        try:
            rows = service.list_mine(caller, status=request.args.get("status"))
        except DomainError as e:
            return error_response(e, empty="leave_requests")
        return json_ok(leave_requests=rows)
