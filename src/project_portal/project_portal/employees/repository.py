from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import EmployeeStatus
from .department_model import Department


class EmployeeRepository(Protocol):
    def list_view(
        self,
        *,
        department_id: Optional[int] = None,
        status: Optional[EmployeeStatus] = None,
        search: Optional[str] = None,
        limit: int = 200,
    ) -> Sequence[dict]:
        raise NotImplementedError

    def list_departments(self) -> Sequence[Department]:
        raise NotImplementedError
