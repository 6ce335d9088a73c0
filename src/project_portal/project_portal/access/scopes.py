"""Row scopes produced by the visibility policy.

A scope describes which rows of an entity a caller may list. It carries no
SQL; ``access.sql`` translates it for the MySQL repositories.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Entity(str, Enum):
    PROJECT = "project"
    TASK = "task"
    INVOICE = "invoice"
    DOCUMENT = "document"
    EMPLOYEE = "employee"
    DEPARTMENT = "department"
    LEAVE_REQUEST = "leave_request"
    CLIENT_COMPANY = "client_company"


class Scope:
    matches_nothing = False


@dataclass(frozen=True)
class Unrestricted(Scope):
    pass


@dataclass(frozen=True)
class NoRows(Scope):
    """Client without a company: an empty result, never an error."""

    matches_nothing = True


@dataclass(frozen=True)
class MemberProjects(Scope):
    """Rows belonging to projects where ``profile_id`` has a ProjectMember row."""

    profile_id: int


@dataclass(frozen=True)
class CompanyProjects(Scope):
    """Rows belonging to the client company ``company_id``."""

    company_id: int


@dataclass(frozen=True)
class AssignedOrUnassigned(Scope):
    """Tasks assigned to ``profile_id`` or to nobody."""

    profile_id: int


UNRESTRICTED = Unrestricted()
NO_ROWS = NoRows()
