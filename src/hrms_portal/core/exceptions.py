from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when form input is invalid.

    ``errors`` maps form field names to messages so pages can render them
    next to the inputs; the exception text is the first message.
    """

    def __init__(self, message: str = "", errors: Optional[dict[str, str]] = None):
        self.errors = dict(errors or {})
        if not message and self.errors:
            message = next(iter(self.errors.values()))
        super().__init__(message)


class AuthenticationError(DomainError):
    """Raised when login fails or the session can no longer be refreshed."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when the backend has no record for the requested id."""


class ApiError(DomainError):
    """Base for failures talking to the backend REST API."""


class ApiResponseError(ApiError):
    """The backend answered with a non-2xx status."""

    def __init__(self, status_code: int, payload: Any = None, message: str = ""):
        self.status_code = int(status_code)
        self.payload = payload
        super().__init__(message or f"Request failed with status {self.status_code}")


class ApiNoResponseError(ApiError):
    """The request was sent but no response arrived (network down, timeout)."""


class ApiRequestError(ApiError):
    """The request could not be built or sent (bad URL, bad arguments)."""
