"""Tests for marketplace request/offer models and the request state machine."""

import pytest
from django_fsm import TransitionNotAllowed

from marketplace.models import FlightCompanionRequest, PickupRequest
from marketplace.state_machines import RequestState
from marketplace.tests.factories import (
    FlightCompanionOfferFactory,
    FlightCompanionRequestFactory,
    PickupRequestFactory,
)


@pytest.mark.django_db
class TestServiceRequest:
    def test_defaults(self):
        request = FlightCompanionRequestFactory()

        assert request.state == RequestState.OPEN
        assert request.is_active is True
        assert request.is_matched is False
        assert request.matched_offer is None
        assert request.matched_at is None

    def test_flight_number_upper_cased(self):
        request = FlightCompanionRequestFactory(flight_number=" nz101 ")
        offer = FlightCompanionOfferFactory(flight_number="nz101")

        assert request.flight_number == "NZ101"
        assert offer.flight_number == "NZ101"

    def test_is_matched_after_match(self):
        request = FlightCompanionRequestFactory()
        FlightCompanionRequest.objects.filter(id=request.id).update(
            state=RequestState.MATCHED
        )

        assert FlightCompanionRequest.objects.get(id=request.id).is_matched is True

    def test_complete_from_matched(self):
        request = PickupRequestFactory()
        PickupRequest.objects.filter(id=request.id).update(state=RequestState.MATCHED)
        request = PickupRequest.objects.get(id=request.id)

        request.complete()
        request.save()

        request = PickupRequest.objects.get(id=request.id)
        assert request.state == RequestState.COMPLETED
        assert request.completed_at is not None
        assert request.is_matched is True

    def test_complete_from_open_not_allowed(self):
        request = PickupRequestFactory()

        with pytest.raises(TransitionNotAllowed):
            request.complete()

    def test_cancel_from_matched(self):
        request = FlightCompanionRequestFactory()
        FlightCompanionRequest.objects.filter(id=request.id).update(
            state=RequestState.MATCHED
        )
        request = FlightCompanionRequest.objects.get(id=request.id)

        request.cancel()
        request.save()

        request = FlightCompanionRequest.objects.get(id=request.id)
        assert request.state == RequestState.CANCELLED
        assert request.cancelled_at is not None
        assert request.completed_at is None

    def test_cancel_from_open_not_allowed(self):
        request = FlightCompanionRequestFactory()

        with pytest.raises(TransitionNotAllowed):
            request.cancel()

    def test_state_is_protected(self):
        """State only changes through transitions or conditional updates."""
        request = FlightCompanionRequest.objects.get(
            id=FlightCompanionRequestFactory().id
        )

        with pytest.raises(AttributeError):
            request.state = RequestState.COMPLETED

    def test_related_names(self, traveler):
        FlightCompanionRequestFactory(user=traveler)
        PickupRequestFactory(user=traveler)

        assert traveler.flightcompanionrequests.count() == 1
        assert traveler.pickuprequests.count() == 1
