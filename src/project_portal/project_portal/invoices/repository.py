from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..access.scopes import Scope
from ..core.enums import InvoiceStatus


class InvoiceRepository(Protocol):
    def list_view(
        self,
        *,
        scope: Scope,
        status: Optional[InvoiceStatus] = None,
        limit: int = 200,
    ) -> Sequence[dict]:
        raise NotImplementedError
