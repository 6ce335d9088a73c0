from __future__ import annotations

from typing import Optional, Sequence

from ..access.context import CallerContext
from ..access.policy import visibility_for
from ..access.scopes import Entity
from .repository import DocumentRepository


class DocumentService:
    def __init__(self, documents: DocumentRepository):
        self._documents = documents

    def list_documents(self, caller: CallerContext, *, search: Optional[str] = None) -> Sequence[dict]:
        scope = visibility_for(caller, Entity.DOCUMENT)
        if scope.matches_nothing:
            return []
        return self._documents.list_view(scope=scope, search=(search or "").strip() or None)
