from __future__ import annotations

from flask import Flask, request

from ..common.http import error_response, json_ok
from ..container import Container
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    @app.route("/invoices", endpoint="invoices")
    @container.guards.login_required
    def invoices(caller):
        try:
            rows = container.invoice_service.list_invoices(caller, status=request.args.get("status"))
        except DomainError as e:
            return error_response(e, empty="invoices")
        return json_ok(invoices=rows)
