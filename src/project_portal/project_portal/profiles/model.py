from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Profile:
    """Identity record of a signed-in user.

    ``role`` is kept as stored; ``AuthService.resolve_caller`` decides whether it
    is a recognized role.
    """

    profile_id: int
    email: str
    full_name: Optional[str]
    password_hash: str
    role: str
    client_company_id: Optional[int] = None
    department: Optional[str] = None
    job_title: Optional[str] = None
    phone: Optional[str] = None
    is_active: bool = True
    profile_completed: bool = False
