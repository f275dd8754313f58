# boundless/errors.py
from __future__ import annotations

from typing import List, Optional


class ValidationError(ValueError):
    """Raised when client input breaks a structural or value rule."""

    def __init__(self, message: str, errors: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors: List[str] = list(errors or [])


class StateError(RuntimeError):
    """Raised when an operation targets an object in the wrong lifecycle state."""
    pass


class ConflictError(RuntimeError):
    """Raised when a write would break a unique index."""
    pass


class NotFoundError(LookupError):
    pass


class PermissionDeniedError(PermissionError):
    pass


class AuthenticationRequiredError(PermissionError):
    pass


class NotificationError(RuntimeError):
    """Raised when the notification service cannot be reached or returns an error."""
    pass
