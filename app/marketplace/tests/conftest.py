"""
Pytest fixtures for marketplace tests.

Usage:
    def test_confirm(escrow_service, fc_request, fc_offer):
        MatchConfirmationService.confirm_flight_companion_match(
            fc_request.id, fc_offer.id, escrow_service=escrow_service
        )
"""

import itertools
from unittest.mock import MagicMock

import pytest

from authentication.tests.factories import UserFactory
from marketplace.services import MatchConfirmationService, ServiceCompletionService
from marketplace.tests.factories import (
    FlightCompanionOfferFactory,
    FlightCompanionRequestFactory,
    PickupOfferFactory,
    PickupRequestFactory,
)
from payments.adapters import PaymentIntentResult
from payments.services import EscrowPaymentService
from payments.state_machines import RequestType


# =============================================================================
# Users
# =============================================================================


@pytest.fixture
def traveler(db):
    return UserFactory(full_name="Alex Traveler", email="alex@example.com")


@pytest.fixture
def helper(db):
    return UserFactory(full_name="Sam Helper", email="sam@example.com")


@pytest.fixture
def admin_user(db):
    return UserFactory(is_staff=True)


@pytest.fixture
def outsider(db):
    return UserFactory()


# =============================================================================
# Gateway
# =============================================================================


@pytest.fixture
def mock_gateway():
    """Stands in for StripeAdapter; each intent gets a distinct id."""
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
    return EscrowPaymentService(gateway=mock_gateway)


@pytest.fixture
def patched_escrow_service(mocker, escrow_service):
    """Routes the services' default escrow service to the mock gateway (API tests)."""
    mocker.patch(
        "marketplace.services.match_confirmation.MatchConfirmationService.escrow_service_class",
        return_value=escrow_service,
    )
    mocker.patch(
        "marketplace.services.completion.ServiceCompletionService.escrow_service_class",
        return_value=escrow_service,
    )
    return escrow_service


# =============================================================================
# Requests and offers
# =============================================================================


@pytest.fixture
def fc_request(traveler):
    return FlightCompanionRequestFactory(user=traveler, offered_amount_cents=5000)


@pytest.fixture
def fc_offer(helper, fc_request):
    return FlightCompanionOfferFactory(
        user=helper,
        flight_number=fc_request.flight_number,
        flight_date=fc_request.flight_date,
    )


@pytest.fixture
def pickup_request(traveler):
    return PickupRequestFactory(user=traveler, offered_amount_cents=6000)


@pytest.fixture
def pickup_offer(helper):
    return PickupOfferFactory(user=helper)


@pytest.fixture
def fc_match(escrow_service, fc_request, fc_offer):
    """A confirmed flight companion match with funds held."""
    return MatchConfirmationService.confirm_flight_companion_match(
        fc_request.id, fc_offer.id, escrow_service=escrow_service
    )


@pytest.fixture
def pickup_match(escrow_service, pickup_request, pickup_offer):
    return MatchConfirmationService.confirm_pickup_match(
        pickup_request.id, pickup_offer.id, escrow_service=escrow_service
    )


@pytest.fixture
def completed_fc_match(escrow_service, fc_match):
    """fc_match after the traveler completed the service."""
    ServiceCompletionService.complete_service(
        fc_match.request.id,
        RequestType.FLIGHT_COMPANION,
        escrow_service=escrow_service,
    )
    return fc_match
