from __future__ import annotations

from typing import Sequence

from ..access.context import CallerContext
from ..access.policy import visibility_for
from ..access.scopes import Entity
from ..common.validators import optional_enum
from ..core.enums import InvoiceStatus
from .repository import InvoiceRepository


class InvoiceService:
    def __init__(self, invoices: InvoiceRepository):
        self._invoices = invoices

    def list_invoices(self, caller: CallerContext, *, status: object = None) -> Sequence[dict]:
        scope = visibility_for(caller, Entity.INVOICE)
        if scope.matches_nothing:
            return []
        return self._invoices.list_view(scope=scope, status=optional_enum(InvoiceStatus, status, "Status"))
