"""
Payment adapters for external services.

Escrow code never calls the Stripe SDK directly; StripeAdapter maps its
errors to payments.exceptions and carries idempotency keys.
"""

from payments.adapters.stripe_adapter import (
    CreatePaymentIntentParams,
    IdempotencyKeyGenerator,
    PaymentIntentResult,
    StripeAdapter,
)

__all__ = [
    "CreatePaymentIntentParams",
    "IdempotencyKeyGenerator",
    "PaymentIntentResult",
    "StripeAdapter",
]
