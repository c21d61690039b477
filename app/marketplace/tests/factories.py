"""
Factory Boy factories for marketplace test data.

Dates default to a week from now so the future-date rule holds; airports
default to AKL -> SYD, both on the supported list.

Usage:
    from marketplace.tests.factories import (
        FlightCompanionRequestFactory,
        FlightCompanionOfferFactory,
    )

    request = FlightCompanionRequestFactory(offered_amount_cents=5000)
    offer = FlightCompanionOfferFactory(
        flight_number=request.flight_number, flight_date=request.flight_date
    )
"""

import datetime
import uuid

import factory
from django.utils import timezone

from authentication.tests.factories import UserFactory
from marketplace.models import (
    FlightCompanionOffer,
    FlightCompanionRequest,
    PickupOffer,
    PickupRequest,
    Rating,
)
from payments.state_machines import RequestType


def next_week():
    return (timezone.now() + datetime.timedelta(days=7)).replace(
        hour=10, minute=30, second=0, microsecond=0
    )


class FlightCompanionRequestFactory(factory.django.DjangoModelFactory):
    """Open, active flight companion request."""

    class Meta:
        model = FlightCompanionRequest

    user = factory.SubFactory(UserFactory)
    flight_number = "NZ101"
    airline = "Air New Zealand"
    flight_date = factory.LazyFunction(next_week)
    departure_airport = "AKL"
    arrival_airport = "SYD"
    traveler_name = "My parents"
    traveler_age = "Elderly"
    offered_amount_cents = 5000


class FlightCompanionOfferFactory(factory.django.DjangoModelFactory):
    """Available offer on the same default flight as the request factory."""

    class Meta:
        model = FlightCompanionOffer

    user = factory.SubFactory(UserFactory)
    flight_number = "NZ101"
    airline = "Air New Zealand"
    flight_date = factory.LazyFunction(next_week)
    departure_airport = "AKL"
    arrival_airport = "SYD"
    available_services = "Translation, Navigation"
    languages = "English, Mandarin"
    requested_amount_cents = 4000


class PickupRequestFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = PickupRequest

    user = factory.SubFactory(UserFactory)
    flight_number = "NZ102"
    arrival_date = factory.LazyFunction(next_week)
    airport = "AKL"
    destination_address = "1 Queen Street, Auckland"
    passenger_name = "Mei Chen"
    passenger_count = 2
    has_luggage = True
    offered_amount_cents = 6000


class PickupOfferFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = PickupOffer

    user = factory.SubFactory(UserFactory)
    airport = "AKL"
    vehicle_type = "SUV"
    max_passengers = 4
    can_handle_luggage = True
    service_area = "Auckland City"
    base_rate_cents = 5000


class RatingFactory(factory.django.DjangoModelFactory):
    """Public five-star rating on a random flight companion request."""

    class Meta:
        model = Rating

    rater = factory.SubFactory(UserFactory)
    rated_user = factory.SubFactory(UserFactory)
    request_type = RequestType.FLIGHT_COMPANION
    request_id = factory.LazyFunction(uuid.uuid4)
    score = 5
    comment = "Very helpful"
