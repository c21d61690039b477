"""
Payment-specific exceptions for escrow operations.

Exception Hierarchy:
    PaymentError (base for payment domain)
    ├── PaymentNotFoundError - Payment lookup failures (404)
    ├── EscrowNotFoundError - Escrow lookup failures (404)
    ├── DisputeNotFoundError - Dispute lookup failures (404)
    ├── PaymentValidationError - Invalid amounts/currency (400)
    └── PaymentProcessingError - Gateway failures (502)
        └── StripeError - Base for all Stripe errors
            ├── StripeCardDeclinedError - Card declined (permanent)
            ├── StripeInsufficientFundsError - Insufficient funds (permanent)
            ├── StripeInvalidRequestError - Invalid request params (permanent)
            ├── StripeRateLimitError - Rate limited (transient, retry)
            ├── StripeAPIUnavailableError - API unavailable (transient, retry)
            └── StripeTimeoutError - Request timeout (transient, retry)

    InvalidStateTransitionError - FSM transition not allowed (inherits ConflictError)

Usage:
    from payments.exceptions import EscrowNotFoundError, InvalidStateTransitionError

    raise InvalidStateTransitionError(
        "Escrow is not held",
        details={"current_state": escrow.status, "target_state": "released"},
    )
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import (
    BaseApplicationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)

if TYPE_CHECKING:
    from typing import Any


# =============================================================================
# Payment Domain Exceptions
# =============================================================================


class PaymentError(BaseApplicationError):
    """
    Base exception for all payment operations.

    Inherits from BaseApplicationError so every payment failure gets the
    standard API error body.
    """

    default_error_code: str = "PAYMENT_ERROR"


class PaymentNotFoundError(PaymentError, NotFoundError):
    """Raised when a Payment cannot be found."""

    default_error_code: str = "PAYMENT_NOT_FOUND"
    status_code: int = 404


class EscrowNotFoundError(PaymentError, NotFoundError):
    """
    Raised when no escrow record exists for the given id.

    Example:
        escrow = Escrow.objects.filter(id=escrow_id).first()
        if not escrow:
            raise EscrowNotFoundError(
                "Escrow not found",
                details={"escrow_id": str(escrow_id)},
            )
    """

    default_error_code: str = "ESCROW_NOT_FOUND"
    status_code: int = 404


class DisputeNotFoundError(PaymentError, NotFoundError):
    """Raised when a Dispute cannot be found."""

    default_error_code: str = "DISPUTE_NOT_FOUND"
    status_code: int = 404


class PaymentValidationError(PaymentError, ValidationError):
    """
    Raised when payment validation fails.

    Example:
        if amount_cents < 0:
            raise PaymentValidationError(
                "Payment amount cannot be negative",
                details={"amount_cents": amount_cents}
            )
    """

    default_error_code: str = "PAYMENT_VALIDATION_ERROR"
    status_code: int = 400


class PaymentProcessingError(PaymentError):
    """Raised when the payment gateway fails to process an operation."""

    default_error_code: str = "PAYMENT_PROCESSING_ERROR"
    status_code: int = 502


# =============================================================================
# Stripe-Specific Exceptions
# =============================================================================


class StripeError(PaymentProcessingError):
    """
    Base exception for all Stripe-related errors.

    Attributes:
        stripe_code: Stripe's internal error code
        decline_code: Card decline code (if applicable)
        is_retryable: Whether the operation can be retried

    Use is_retryable to determine retry behavior:
    - True: Transient error, safe to retry with backoff
    - False: Permanent error, do not retry
    """

    default_error_code: str = "STRIPE_ERROR"
    is_retryable: bool = False

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        stripe_code: str | None = None,
        decline_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if stripe_code:
            details["stripe_code"] = stripe_code
        if decline_code:
            details["decline_code"] = decline_code
        super().__init__(message, error_code=error_code, details=details)
        self.stripe_code = stripe_code
        self.decline_code = decline_code


# -----------------------------------------------------------------------------
# Permanent Errors (do not retry)
# -----------------------------------------------------------------------------


class StripeCardDeclinedError(StripeError):
    """
    Card was declined by the issuing bank.

    The traveler has to use another card; the match is not confirmed.
    """

    default_error_code: str = "CARD_DECLINED"
    status_code: int = 402
    is_retryable: bool = False


class StripeInsufficientFundsError(StripeError):
    """Insufficient funds on the payment method."""

    default_error_code: str = "INSUFFICIENT_FUNDS"
    status_code: int = 402
    is_retryable: bool = False


class StripeInvalidRequestError(StripeError):
    """
    Invalid request parameters sent to Stripe.

    This usually indicates a bug in our code, not a user error.
    """

    default_error_code: str = "INVALID_STRIPE_REQUEST"
    is_retryable: bool = False


# -----------------------------------------------------------------------------
# Transient Errors (safe to retry with backoff)
# -----------------------------------------------------------------------------


class StripeRateLimitError(StripeError):
    """Rate limited by Stripe API."""

    default_error_code: str = "STRIPE_RATE_LIMITED"
    status_code: int = 503
    is_retryable: bool = True


class StripeAPIUnavailableError(StripeError):
    """
    Stripe API is temporarily unavailable.

    Covers network connectivity issues and Stripe server errors (5xx).
    """

    default_error_code: str = "STRIPE_UNAVAILABLE"
    status_code: int = 503
    is_retryable: bool = True


class StripeTimeoutError(StripeError):
    """
    Stripe API call timed out.

    The operation may have succeeded on Stripe's side. Retrying with the
    same idempotency key returns the original response.
    """

    default_error_code: str = "STRIPE_TIMEOUT"
    status_code: int = 504
    is_retryable: bool = True


# =============================================================================
# State Machine Exceptions
# =============================================================================


class InvalidStateTransitionError(ConflictError):
    """
    Raised when a state machine transition is not allowed.

    Wraps django-fsm's TransitionNotAllowed so callers get the standard
    error format, for example releasing an escrow that was already
    released or refunded.

    Attributes:
        details: Contains current_state and target_state
    """

    default_error_code: str = "INVALID_STATE"


__all__ = [
    "PaymentError",
    "PaymentNotFoundError",
    "EscrowNotFoundError",
    "DisputeNotFoundError",
    "PaymentValidationError",
    "PaymentProcessingError",
    "StripeError",
    "StripeCardDeclinedError",
    "StripeInsufficientFundsError",
    "StripeInvalidRequestError",
    "StripeRateLimitError",
    "StripeAPIUnavailableError",
    "StripeTimeoutError",
    "InvalidStateTransitionError",
]
