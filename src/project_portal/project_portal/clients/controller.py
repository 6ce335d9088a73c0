from __future__ import annotations

from flask import Flask, request

from ..common.http import error_response, form_data, json_ok
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    guards = container.guards
    service = container.client_service

    @app.route("/clients", methods=["GET", "POST"], endpoint="clients")
    @guards.roles_required(Role.ADMIN, Role.HR)
    def clients(caller):
        if request.method == "POST":
            data = form_data()
            try:
                company_id = service.create_client(
                    caller,
                    name=data.get("name", ""),
                    contact_name=data.get("contact_name", ""),
                    contact_email=data.get("contact_email", ""),
                    contact_phone=data.get("contact_phone", ""),
                    website=data.get("website", ""),
                )
            except DomainError as e:
                return error_response(e)
            return json_ok(201, message="Client added", company_id=company_id)

        try:
            rows = service.list_clients(caller, search=request.args.get("search"))
        except DomainError as e:
            return error_response(e, empty="clients")
        return json_ok(clients=rows)
