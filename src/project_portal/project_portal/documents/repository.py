from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..access.scopes import Scope


class DocumentRepository(Protocol):
    def list_view(self, *, scope: Scope, search: Optional[str] = None, limit: int = 200) -> Sequence[dict]:
        raise NotImplementedError

    def list_for_project(self, project_id: int) -> Sequence[dict]:
        raise NotImplementedError
