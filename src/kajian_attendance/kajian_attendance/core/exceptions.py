from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class OperationTimeout(DomainError):
    """Raised when a multi-step flow runs past its deadline."""


class StoreError(Exception):
    """A read or write against the data store failed.

    `message` is the backend's own text and is shown to the user verbatim.
    """

    def __init__(self, message: str, *, table: Optional[str] = None, operation: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.table = table
        self.operation = operation


class UniqueViolation(StoreError):
    """Insert collided with a primary or composite unique key."""
