"""
Domain-specific exception hierarchy for the salon booking engine.

Every error carries the HTTP status a service layer would map it to, so the
caller decides the outward representation without inspecting messages.
"""

from __future__ import annotations

from typing import Any


class SalonBookError(Exception):
    """Base class for all application-level errors."""

    status_code: int = 500
    retryable: bool = False

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(SalonBookError):
    """Raised when a salon, service or appointment does not exist."""

    status_code = 404


class ValidationError(SalonBookError):
    """Raised when request input (dates, times, payloads) is malformed."""

    status_code = 400


class MalformedTimeError(ValidationError):
    """Raised when a business-hours string is not a zero-padded HH:MM value."""

    def __init__(self, value: Any) -> None:
        super().__init__(f"Malformed time '{value}', expected HH:MM (24-hour)")
        self.value = value


class InvalidTransitionError(ValidationError):
    """Raised when the status transition table rejects a request."""

    def __init__(self, current: Any, target: Any, role: Any) -> None:
        super().__init__(
            f"Cannot change status from '{_plain(current)}' to "
            f"'{_plain(target)}' with role '{_plain(role)}'"
        )
        self.current = current
        self.target = target
        self.role = role


class AuthorizationError(SalonBookError):
    """Raised when an actor may not act on an appointment."""

    status_code = 403


class ConflictError(SalonBookError):
    """Raised by the storage boundary when a concurrent booking collides."""

    status_code = 409
    retryable = True


def _plain(value: Any) -> str:
    return str(getattr(value, "value", value))
