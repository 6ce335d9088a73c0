from __future__ import annotations

from datetime import date
from typing import Protocol


class DashboardRepository(Protocol):
    """Per-role aggregates.

    Each summary returns ``counts`` (name -> int), raw status distributions
    (status -> count, missing statuses omitted) and ``recent_*`` row lists.
    """

    def admin_summary(self, *, recent_limit: int = 5) -> dict:
        raise NotImplementedError

    def hr_summary(self, *, hired_since: date, recent_limit: int = 5) -> dict:
        raise NotImplementedError

    def team_summary(self, *, profile_id: int, recent_limit: int = 5) -> dict:
        raise NotImplementedError

    def client_summary(self, *, company_id: int, recent_limit: int = 5) -> dict:
        raise NotImplementedError
