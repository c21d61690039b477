"""
Tests for the central DRF exception handler.

Verifies that application exceptions map to their HTTP status with the
structured body, DRF exceptions keep DRF's behaviour, and unexpected
exceptions become a generic 500 without leaking details.
"""

from rest_framework import exceptions as drf_exceptions
from rest_framework import status

from core.exception_handler import api_exception_handler
from core.exceptions import (
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    PermissionDeniedError,
    RateLimitError,
    ValidationError,
)


def _handle(exc):
    return api_exception_handler(exc, {"view": None, "request": None})


class TestApplicationErrors:
    """Application exceptions are translated using their status_code."""

    def test_validation_error_maps_to_400(self):
        """Should return 400 with field details."""
        response = _handle(
            ValidationError(
                "Validation failed",
                details={"flight_date": ["Flight date must be in the future."]},
            )
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {
            "error": "Validation failed",
            "error_code": "VALIDATION_ERROR",
            "details": {"flight_date": ["Flight date must be in the future."]},
        }

    def test_not_found_maps_to_404(self):
        """Should return 404 without a details key when details are empty."""
        response = _handle(NotFoundError("Request not found"))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {"error": "Request not found", "error_code": "NOT_FOUND"}

    def test_conflict_maps_to_409(self):
        """Should keep a custom error code."""
        response = _handle(
            ConflictError("Offer is not available", error_code="OFFER_UNAVAILABLE")
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["error_code"] == "OFFER_UNAVAILABLE"

    def test_permission_denied_maps_to_403(self):
        """Should return 403."""
        response = _handle(PermissionDeniedError("Not your request"))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_rate_limit_maps_to_429(self):
        """Should return 429."""
        response = _handle(RateLimitError("Slow down"))

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS

    def test_external_service_maps_to_502(self):
        """Should return 502."""
        response = _handle(ExternalServiceError("Gateway down"))

        assert response.status_code == status.HTTP_502_BAD_GATEWAY


class TestFrameworkAndUnexpectedErrors:
    """Non-application exceptions."""

    def test_drf_exceptions_use_default_handler(self):
        """Should leave DRF's own error formatting intact."""
        response = _handle(drf_exceptions.NotAuthenticated())

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert "detail" in response.data

    def test_unexpected_exception_returns_generic_500(self):
        """Should not leak the exception message to the client."""
        response = _handle(RuntimeError("database password is hunter2"))

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data == {
            "error": "An unexpected error occurred",
            "error_code": "INTERNAL_SERVER_ERROR",
        }
        assert "hunter2" not in str(response.data)

    def test_unexpected_exception_is_logged(self, caplog):
        """Should log the unexpected exception with a traceback."""
        with caplog.at_level("ERROR", logger="core.exception_handler"):
            _handle(KeyError("boom"))

        assert any(record.exc_info for record in caplog.records)
