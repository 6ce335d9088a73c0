from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ClientCompany


class ClientRepository(Protocol):
    def get_by_id(self, company_id: int) -> Optional[ClientCompany]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[ClientCompany]:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        contact_name: Optional[str] = None,
        contact_email: Optional[str] = None,
        contact_phone: Optional[str] = None,
        website: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def list_view(self, *, search: Optional[str] = None, limit: int = 200) -> Sequence[dict]:
        """Return UI rows with project and contact counts."""

        raise NotImplementedError
