from __future__ import annotations

from typing import Optional, Sequence

from ..access.context import CallerContext
from ..access.policy import require_role, visibility_for
from ..access.scopes import Entity
from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import ValidationError
from .repository import ClientRepository


class ClientService:
    def __init__(self, clients: ClientRepository):
        self._clients = clients

    def list_clients(self, caller: CallerContext, *, search: Optional[str] = None) -> Sequence[dict]:
        visibility_for(caller, Entity.CLIENT_COMPANY)
        return self._clients.list_view(search=(search or "").strip() or None)

    def create_client(
        self,
        caller: CallerContext,
        *,
        name: str,
        contact_name: Optional[str] = "",
        contact_email: Optional[str] = "",
        contact_phone: Optional[str] = "",
        website: Optional[str] = "",
    ) -> int:
        require_role(caller, {Role.ADMIN}, "Only admins can add clients")

        name = require_non_empty(name, "Company name")
        if self._clients.get_by_name(name):
            raise ValidationError("A client with this name already exists")

        return self._clients.create(
            name=name,
            contact_name=(contact_name or "").strip() or None,
            contact_email=(contact_email or "").strip() or None,
            contact_phone=(contact_phone or "").strip() or None,
            website=(website or "").strip() or None,
        )
