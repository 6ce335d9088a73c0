from __future__ import annotations

import logging

from flask import Flask, redirect, request, session, url_for

from ..common.http import error_response, form_data, json_error, json_ok
from ..common.validators import as_flag
from ..container import Container
from ..core.enums import SELF_SERVICE_ROLES
from ..core.exceptions import AuthenticationError, DomainError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    guards = container.guards

    @app.route("/", endpoint="index")
    def index():
        if "user_id" in session:
            return redirect(url_for("dashboard"))
        return redirect(url_for("login"))

    @app.route("/login", methods=["GET", "POST"], endpoint="login")
    def login():
        if "user_id" in session and session.get("profile_completed"):
            return redirect(url_for("dashboard"))

        if request.method != "POST":
            return json_ok(message="Sign in with your email and password", fields=["email", "password", "remember_me"])

        data = form_data()
        try:
            s_user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
        except AuthenticationError as e:
            return json_error(str(e), 401)
        except DomainError as e:
            return error_response(e)

        session.clear()
        session.permanent = as_flag(data.get("remember_me"))
        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value if s_user.role else None
        session["profile_completed"] = s_user.profile_completed

        logger.info("profile=%s signed in", s_user.user_id)
        if not s_user.profile_completed:
            return redirect(url_for("complete_profile"))
        return redirect(url_for("dashboard"))

    @app.route("/logout", endpoint="logout")
    def logout():
        session.clear()
        return redirect(url_for("login"))

    @app.route("/auth/complete-profile", methods=["GET", "POST"], endpoint="complete_profile")
    @guards.signed_in
    def complete_profile():
        user_id = session.get("user_id")
        try:
            if container.auth_service.is_profile_completed(user_id):
                session["profile_completed"] = True
                return redirect(url_for("dashboard"))

            if request.method != "POST":
                return json_ok(
                    message="Complete your profile to continue",
                    roles=sorted(r.value for r in SELF_SERVICE_ROLES),
                    fields=["full_name", "role", "job_title", "department", "phone", "company_name"],
                )

            data = form_data()
            caller = container.auth_service.complete_profile(
                profile_id=user_id,
                full_name=data.get("full_name", ""),
                role=data.get("role", ""),
                job_title=data.get("job_title", ""),
                department=data.get("department", ""),
                phone=data.get("phone", ""),
                company_name=data.get("company_name", ""),
            )
        except DomainError as e:
            return error_response(e)

        session["name"] = caller.full_name
        session["role"] = caller.role.value
        session["profile_completed"] = True
        return redirect(url_for("dashboard"))