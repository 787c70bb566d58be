"""Exception classes for LibreTime API client."""

from typing import Optional


class LibreTimeError(Exception):
    """Base exception for all LibreTime API errors.

    Attributes:
        status: HTTP status code (None for transport failures)
        message: Error summary
        details: Response body or underlying error text
    """

    def __init__(self, status: Optional[int], message: str, details: str = ""):
        """Initialize LibreTime error.

        Args:
            status: HTTP status code returned by the server, if any
            message: Human-readable error message
            details: Raw response text for debugging
        """
        self.status = status
        self.message = message
        self.details = details
        super().__init__(f"LibreTime Error {status}: {message}")


class LibreTimeAuthenticationError(LibreTimeError):
    """Authentication failed (HTTP 401, 403).

    Raised when the API key is missing, wrong or lacks permissions.
    """

    pass


class LibreTimeValidationError(LibreTimeError):
    """Request rejected as invalid (HTTP 400, 422)."""

    pass


class LibreTimeNotFoundError(LibreTimeError):
    """Requested resource not found (HTTP 404)."""

    pass


class LibreTimeConflictError(LibreTimeError):
    """Request conflicts with existing schedule (HTTP 409)."""

    pass
