"""
Pytest fixtures for payment tests.

This module provides fixtures for creating payment-related test data.
Fixtures are designed to provide objects in various states for testing
state transitions and business logic.

Usage:
    def test_release(escrow_service, held_escrow):
        escrow_service.release_funds(held_escrow.id)
"""

import itertools
from unittest.mock import MagicMock

import pytest

from authentication.tests.factories import UserFactory
from payments.adapters import PaymentIntentResult
from payments.services import EscrowPaymentService
from payments.tests.factories import (
    DisputeFactory,
    EscrowFactory,
    PaymentFactory,
)


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def traveler(db):
    """User who posted the request and pays."""
    return UserFactory(full_name="Alex Traveler")


@pytest.fixture
def helper(db):
    """User who posted the offer and receives the payment."""
    return UserFactory(full_name="Sam Helper")


@pytest.fixture
def admin_user(db):
    """Staff user allowed to resolve disputes."""
    return UserFactory(is_staff=True)


@pytest.fixture
def outsider(db):
    """User unrelated to any payment."""
    return UserFactory()


# =============================================================================
# Gateway Fixtures
# =============================================================================


@pytest.fixture
def mock_gateway():
    """
    Gateway double standing in for StripeAdapter.

    Every create_payment_intent call returns a distinct PaymentIntent id so
    the unique constraint on Payment.stripe_payment_intent_id is respected.
    """
    counter = itertools.count(1)
    gateway = MagicMock()

    def _create(params):
        return PaymentIntentResult(
            id=f"pi_mock_{next(counter):06d}",
            status="requires_capture",
            amount_cents=params.amount_cents,
            currency=params.currency,
            metadata=params.metadata,
        )

    gateway.create_payment_intent.side_effect = _create
    return gateway


@pytest.fixture
def escrow_service(mock_gateway):
    """EscrowPaymentService wired to the mock gateway."""
    return EscrowPaymentService(gateway=mock_gateway)


# =============================================================================
# Payment State Fixtures
# =============================================================================


@pytest.fixture
def created_payment(db, traveler, helper):
    """Payment in CREATED state, no escrow yet."""
    return PaymentFactory(payer=traveler, receiver=helper, amount_cents=5000)


@pytest.fixture
def held_escrow(db, traveler, helper):
    """Escrow in HELD state with its payment in HELD_IN_ESCROW."""
    return EscrowFactory(
        payment__payer=traveler,
        payment__receiver=helper,
        payment__amount_cents=5000,
    )


@pytest.fixture
def held_payment(held_escrow):
    """Payment in HELD_IN_ESCROW state."""
    return held_escrow.payment


@pytest.fixture
def open_dispute(held_payment, traveler):
    """Open dispute raised by the traveler on a held payment."""
    return DisputeFactory(payment=held_payment, raised_by=traveler)
