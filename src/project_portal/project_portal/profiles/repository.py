from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import Role
from .model import Profile


class ProfileRepository(Protocol):
    def get_by_id(self, profile_id: int) -> Optional[Profile]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Profile]:
        raise NotImplementedError

    def complete_profile(
        self,
        *,
        profile_id: int,
        full_name: str,
        role: Role,
        job_title: Optional[str],
        department: Optional[str],
        phone: Optional[str],
        client_company_id: Optional[int],
    ) -> bool:
        """Fill in a first-login profile; False when it was already completed."""

        raise NotImplementedError
