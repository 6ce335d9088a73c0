from __future__ import annotations

import logging
from functools import wraps
from typing import Callable

from flask import redirect, session, url_for

from ..common.http import to_dashboard, to_login
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .service import AuthService

logger = logging.getLogger(__name__)


class Guards:
    """Route decorators that resolve the CallerContext and pass it into the view.

    Views decorated here are called as ``view(caller, *args, **kwargs)``.
    """

    def __init__(self, auth_service: AuthService):
        self._auth = auth_service

    def signed_in(self, view: Callable) -> Callable:
        """Session required; the profile may still be incomplete."""

        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return redirect(url_for("login"))
            return view(*args, **kwargs)

        return wrapper

    def login_required(self, view: Callable) -> Callable:
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return redirect(url_for("login"))
            if not session.get("profile_completed"):
                return redirect(url_for("complete_profile"))

            try:
                caller = self._auth.resolve_caller(session.get("user_id"))
            except AuthenticationError as e:
                logger.info("session rejected: %s", e)
                return to_login()

            return view(caller, *args, **kwargs)

        return wrapper

    def roles_required(self, *roles: Role) -> Callable[[Callable], Callable]:
        allowed = frozenset(roles)

        def decorator(view: Callable) -> Callable:
            @wraps(view)
            def checked(caller, *args, **kwargs):
                if caller.role not in allowed:
                    logger.warning(
                        "profile=%s role=%s sent away from %s", caller.profile_id, caller.role.value, view.__name__
                    )
                    return to_dashboard()
                return view(caller, *args, **kwargs)

            return self.login_required(checked)

        return decorator