from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class CallerContext:
    """Who is making the request.

    Built once per request by ``AuthService.resolve_caller`` and passed
    explicitly into every service call.
    """

    profile_id: int
    role: Role
    client_company_id: Optional[int] = None
    full_name: str = ""
