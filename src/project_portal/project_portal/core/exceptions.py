from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when there is no valid session, the credentials are wrong or the profile is unusable."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced entity is absent or not visible to the caller."""


class TransitionConflictError(DomainError):
    """Raised when a conditional status write matched no row.

    ``current_status`` carries the status found on re-read, when the row exists.
    """

    def __init__(self, message: str, *, current_status: Optional[str] = None):
        super().__init__(message)
        self.current_status = current_status


class StoreError(DomainError):
    """Raised when the backing store fails in a way the caller cannot fix."""
