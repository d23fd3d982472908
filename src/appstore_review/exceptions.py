"""
Exception classes for appstore-connect-review.
"""

from typing import Any, List, Optional


class AppStoreConnectError(Exception):
    """
    Base exception class for App Store Connect API errors.

    Args:
        message: Human readable error message
        status_code: HTTP status code, when the error came from a response
        errors: Decoded JSON:API ``errors`` entries from the response body
    """

    def __init__(
        self,
        message: str = "",
        status_code: Optional[int] = None,
        errors: Optional[List[Any]] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.errors = errors or []


class AuthenticationError(AppStoreConnectError):
    """Raised when authentication fails."""

    pass


class RateLimitError(AppStoreConnectError):
    """Raised when rate limits are exceeded."""

    pass


class ValidationError(AppStoreConnectError):
    """Raised when request validation fails."""

    pass


class NotFoundError(AppStoreConnectError):
    """Raised when requested resource is not found."""

    pass


class PermissionError(AppStoreConnectError):
    """Raised when insufficient permissions for operation."""

    pass


class ConflictError(AppStoreConnectError):
    """Raised when the request conflicts with the current resource state."""

    pass


class ServerError(AppStoreConnectError):
    """Raised when server returns 5xx error."""

    pass
