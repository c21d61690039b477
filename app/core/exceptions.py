"""
Base exception classes for application-wide error handling.

Every business-rule failure in the marketplace and payments apps is raised
as one of these exceptions and translated to an HTTP response by
core.exception_handler.api_exception_handler.

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Malformed input (400)
    ├── PermissionDeniedError - Authorization failures (403)
    ├── NotFoundError - Resource not found (404)
    ├── ConflictError - State precondition violated (409)
    ├── RateLimitError - Rate limit exceeded (429)
    └── ExternalServiceError - Third-party service failures (502)

Usage:
    from core.exceptions import ConflictError, NotFoundError

    raise NotFoundError(
        "Flight companion request not found",
        error_code="REQUEST_NOT_FOUND",
        details={"request_id": str(request_id)},
    )

    raise ConflictError("Request is already matched", error_code="ALREADY_MATCHED")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field errors, ids, states)
        status_code: HTTP status the API layer responds with
    """

    default_error_code: str = "APPLICATION_ERROR"
    status_code: int = 400

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Example:
            {
                "error": "Offer is not available",
                "error_code": "OFFER_UNAVAILABLE",
                "details": {"offer_id": "9b1d..."}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when input is malformed or breaks a business rule on creation.

    Use for negative amounts, flight dates in the past, unsupported
    airports and similar field-level problems. Field errors go in details:

        raise ValidationError(
            "Validation failed",
            details={"flight_date": ["Flight date must be in the future."]},
        )
    """

    default_error_code: str = "VALIDATION_ERROR"
    status_code: int = 400


class NotFoundError(BaseApplicationError):
    """Raised when a requested resource does not exist."""

    default_error_code: str = "NOT_FOUND"
    status_code: int = 404


class PermissionDeniedError(BaseApplicationError):
    """
    Raised when the user lacks permission for an operation.

    For authentication failures (missing/invalid token) DRF's own
    NotAuthenticated is used instead.
    """

    default_error_code: str = "PERMISSION_DENIED"
    status_code: int = 403


class ConflictError(BaseApplicationError):
    """
    Raised when an operation conflicts with current resource state.

    Use for:
    - Request already matched
    - Offer no longer available
    - Invalid state transitions
    - Concurrent modification conflicts
    """

    default_error_code: str = "CONFLICT"
    status_code: int = 409


class RateLimitError(BaseApplicationError):
    """Raised when rate limit is exceeded. Include retry_after in details."""

    default_error_code: str = "RATE_LIMIT_EXCEEDED"
    status_code: int = 429


class ExternalServiceError(BaseApplicationError):
    """
    Raised when an external service call fails.

    Log the original error for debugging but don't expose internal
    details to clients.
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"
    status_code: int = 502
