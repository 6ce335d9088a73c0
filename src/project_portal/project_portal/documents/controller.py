from __future__ import annotations

from flask import Flask, request

from ..common.http import error_response, json_ok
from ..container import Container
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    @app.route("/documents", endpoint="documents")
    @container.guards.login_required
    def documents(caller):
        try:
            rows = container.document_service.list_documents(caller, search=request.args.get("search"))
        except DomainError as e:
            return error_response(e, empty="documents")
        return json_ok(documents=rows)
