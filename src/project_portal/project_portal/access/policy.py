from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError
from .context import CallerContext
from .scopes import (
    NO_ROWS,
    UNRESTRICTED,
    AssignedOrUnassigned,
    CompanyProjects,
    Entity,
    MemberProjects,
    Scope,
)

logger = logging.getLogger(__name__)

# Listing these is an HR/back-office concern; other roles are sent away, not filtered.
STAFF_ONLY_ENTITIES = frozenset(
    {Entity.EMPLOYEE, Entity.DEPARTMENT, Entity.LEAVE_REQUEST, Entity.CLIENT_COMPANY}
)


def visibility_for(caller: CallerContext, entity: Entity) -> Scope:
    """Return the scope restricting a listing of ``entity`` for ``caller``.

    Raises AuthorizationError when the role may not list the entity at all.
    """

    if caller.role in (Role.ADMIN, Role.HR):
        return UNRESTRICTED

    if entity in STAFF_ONLY_ENTITIES:
        logger.warning("denied %s listing for profile=%s role=%s", entity.value, caller.profile_id, caller.role.value)
        raise AuthorizationError("You do not have access to this page")

    if caller.role == Role.TEAM:
        if entity == Entity.TASK:
            return AssignedOrUnassigned(caller.profile_id)
        return MemberProjects(caller.profile_id)

    if caller.role == Role.CLIENT:
        if caller.client_company_id is None:
            return NO_ROWS
        return CompanyProjects(int(caller.client_company_id))

    raise AuthenticationError("Unrecognized role")


def require_role(caller: CallerContext, allowed: Iterable[Role], message: Optional[str] = None) -> None:
    allowed = frozenset(allowed)
    if caller.role not in allowed:
        logger.warning("denied action for profile=%s role=%s", caller.profile_id, caller.role.value)
        raise AuthorizationError(message or "You do not have permission for this action")


def can_edit_project(caller: CallerContext, *, is_member: bool) -> bool:
    if caller.role == Role.ADMIN:
        return True
    return caller.role == Role.TEAM and is_member


def can_edit_task(caller: CallerContext, *, assignee_id: Optional[int], is_member: bool) -> bool:
    if caller.role == Role.ADMIN:
        return True
    if caller.role != Role.TEAM or not is_member:
        return False
    return assignee_id is None or int(assignee_id) == caller.profile_id
