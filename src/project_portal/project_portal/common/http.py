"""JSON response helpers shared by the feature controllers."""

from __future__ import annotations

import logging
from typing import Optional

from flask import Flask, jsonify, redirect, request, session, url_for
from werkzeug.exceptions import HTTPException, InternalServerError

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    StoreError,
    TransitionConflictError,
    ValidationError,
)

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Something went wrong while loading data. Please try again."


def form_data() -> dict:
    """Request fields from a JSON body or an HTML form post."""

    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def json_ok(status: int = 200, **payload):
    body = {"success": True}
    body.update(payload)
    return jsonify(body), status


def json_error(message: str, status: int, **extra):
    body = {"success": False, "message": message}
    body.update(extra)
    return jsonify(body), status


def to_login():
    session.clear()
    return redirect(url_for("login"))


def to_dashboard():
    return redirect(url_for("dashboard"))


def error_response(exc: DomainError, *, back: Optional[str] = None, empty: Optional[str] = None):
    """Translate a domain error raised inside a view.

    ``back`` is the "go back" target for NotFound; ``empty`` names the list key a
    listing view degrades to on store failure. Call from inside the ``except``
    block so store failures are logged with their traceback.
    """

    if isinstance(exc, AuthenticationError):
        return to_login()
    if isinstance(exc, AuthorizationError):
        return to_dashboard()
    if isinstance(exc, NotFoundError):
        return json_error(str(exc), 404, back=back or url_for("dashboard"))
    if isinstance(exc, TransitionConflictError):
        return json_error(str(exc), 409, current_status=exc.current_status)
    if isinstance(exc, ValidationError):
        return json_error(str(exc), 400)
    if isinstance(exc, StoreError):
        logger.exception("store failure")
        if empty:
            return json_error(GENERIC_FAILURE, 503, **{empty: []})
        return json_error(GENERIC_FAILURE, 503)
    return json_error(str(exc), 400)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):
        return json_error(e.description or e.name, e.code or 500)

    @app.errorhandler(InternalServerError)
    def _server_error(e: InternalServerError):
        original = getattr(e, "original_exception", None)
        if original is not None:
            logger.error("unhandled error: %r", original)
        return json_error("Unexpected server error", 500)
