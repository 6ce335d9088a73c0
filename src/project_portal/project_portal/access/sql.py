"""Translate scopes into MySQL WHERE fragments.

Each entity is queried under a fixed table alias (see ``ALIASES``); the
fragments reference those aliases and use ``%s`` placeholders.
"""

from __future__ import annotations

from typing import List, Tuple

from .scopes import (
    AssignedOrUnassigned,
    CompanyProjects,
    Entity,
    MemberProjects,
    NoRows,
    Scope,
    Unrestricted,
)

ALIASES = {
    Entity.PROJECT: "p",
    Entity.TASK: "t",
    Entity.INVOICE: "i",
    Entity.DOCUMENT: "d",
}

_MEMBER_PROJECT_IDS = "SELECT pm.project_id FROM project_members pm WHERE pm.profile_id = %s"
_COMPANY_PROJECT_IDS = "SELECT cp.project_id FROM projects cp WHERE cp.client_company_id = %s"


def scope_clause(scope: Scope, entity: Entity) -> Tuple[List[str], List[object]]:
    """Return ``(clauses, params)`` to AND into a listing query for ``entity``."""

    alias = ALIASES.get(entity)
    if alias is None:
        raise ValueError(f"No row scope for entity {entity.value!r}")

    if isinstance(scope, Unrestricted):
        return [], []

    if isinstance(scope, NoRows):
        return ["1=0"], []

    if isinstance(scope, MemberProjects):
        if entity == Entity.PROJECT:
            return (
                [
                    "EXISTS (SELECT 1 FROM project_members pm "
                    "WHERE pm.project_id = p.project_id AND pm.profile_id = %s)"
                ],
                [int(scope.profile_id)],
            )
        return [f"{alias}.project_id IN ({_MEMBER_PROJECT_IDS})"], [int(scope.profile_id)]

    if isinstance(scope, CompanyProjects):
        if entity == Entity.TASK:
            return [f"t.project_id IN ({_COMPANY_PROJECT_IDS})"], [int(scope.company_id)]
        return [f"{alias}.client_company_id = %s"], [int(scope.company_id)]

    if isinstance(scope, AssignedOrUnassigned):
        if entity != Entity.TASK:
            raise ValueError("AssignedOrUnassigned only applies to tasks")
        return ["(t.assignee_id = %s OR t.assignee_id IS NULL)"], [int(scope.profile_id)]

    raise ValueError(f"Unsupported scope {scope!r}")
