from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash

from ..access.context import CallerContext
from ..clients.repository import ClientRepository
from ..common.validators import require_enum, require_non_empty
from ..core.enums import SELF_SERVICE_ROLES, Role
from ..core.exceptions import AuthenticationError, ValidationError
from ..profiles.repository import ProfileRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: int
    full_name: str
    role: Optional[Role]
    profile_completed: bool


class AuthService:
    """Use cases: sign in, resolve the caller of a request, complete a first-login profile."""

    def __init__(self, profiles: ProfileRepository, clients: ClientRepository):
        self._profiles = profiles
        self._clients = clients

    def authenticate(self, email: str, password: str) -> SessionUser:
        email = (email or "").strip().lower()
        profile = self._profiles.get_by_email(email) if email else None
        if not profile or not profile.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(profile.password_hash, password or "")
        except ValueError:
            # placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.warning("failed sign-in for %s", email)
            raise AuthenticationError("Invalid email or password")

        return SessionUser(
            user_id=profile.profile_id,
            full_name=profile.full_name or profile.email,
            role=Role.parse(profile.role),
            profile_completed=profile.profile_completed,
        )

    def resolve_caller(self, profile_id: Optional[int]) -> CallerContext:
        """Load the profile behind a session and build the request's CallerContext.

        Missing, inactive or unrecognized-role profiles raise AuthenticationError;
        the guards clear the session and send the caller to login.
        """

        if profile_id is None:
            raise AuthenticationError("Please sign in to continue")

        profile = self._profiles.get_by_id(int(profile_id))
        if not profile or not profile.is_active:
            raise AuthenticationError("Your session is no longer valid")

        role = Role.parse(profile.role)
        if role is None:
            logger.warning("profile=%s has unrecognized role %r", profile.profile_id, profile.role)
            raise AuthenticationError("Your account has no valid role")

        return CallerContext(
            profile_id=profile.profile_id,
            role=role,
            client_company_id=profile.client_company_id if role == Role.CLIENT else None,
            full_name=profile.full_name or profile.email,
        )

    def is_profile_completed(self, profile_id: int) -> bool:
        profile = self._profiles.get_by_id(int(profile_id))
        return bool(profile and profile.profile_completed)

    def complete_profile(
        self,
        *,
        profile_id: int,
        full_name: str,
        role: str,
        job_title: Optional[str] = "",
        department: Optional[str] = "",
        phone: Optional[str] = "",
        company_name: Optional[str] = "",
    ) -> CallerContext:
        profile = self._profiles.get_by_id(int(profile_id))
        if not profile or not profile.is_active:
            raise AuthenticationError("Your session is no longer valid")
        if profile.profile_completed:
            raise ValidationError("Profile is already completed")

        full_name = require_non_empty(full_name, "Full name")
        chosen = require_enum(Role, role, "Role")
        if chosen not in SELF_SERVICE_ROLES:
            raise ValidationError("Admin and HR roles are assigned by an administrator")

        company_id: Optional[int] = None
        if chosen == Role.CLIENT:
            name = require_non_empty(company_name, "Company name")
            company = self._clients.get_by_name(name)
            if company:
                company_id = company.company_id
            else:
                company_id = self._clients.create(name=name, contact_name=full_name, contact_email=profile.email)
                logger.info("created client company %r for profile=%s", name, profile.profile_id)

        if not self._profiles.complete_profile(
            profile_id=profile.profile_id,
            full_name=full_name,
            role=chosen,
            job_title=(job_title or "").strip() or None,
            department=(department or "").strip() or None,
            phone=(phone or "").strip() or None,
            client_company_id=company_id,
        ):
            raise ValidationError("Profile is already completed")

        return CallerContext(
            profile_id=profile.profile_id,
            role=chosen,
            client_company_id=company_id,
            full_name=full_name,
        )
