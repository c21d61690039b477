"""
Candidate offers for a traveler's request.

Matching is an exact-field query, no scoring:

    Flight companion: same flight number, same calendar date of the
        flight, same departure and arrival airports; cheapest
        requested_amount_cents first.
    Pickup: same airport, enough seats, luggage handled when the
        traveler has luggage; cheapest base_rate_cents first.

Only available offers are ever returned. Ties are broken by created_at so
results are deterministic.
"""

from __future__ import annotations

import uuid

from django.utils import timezone

from core.exceptions import NotFoundError
from core.services import BaseService

from marketplace.models import (
    FlightCompanionOffer,
    FlightCompanionRequest,
    PickupOffer,
    PickupRequest,
)


class MatchingService(BaseService):
    """Read-only queries; nothing here writes to the database."""

    @classmethod
    def find_flight_companion_matches(
        cls, request_id: uuid.UUID | str
    ) -> list[FlightCompanionOffer]:
        """
        Offers on the same flight and route as the request.

        Raises:
            NotFoundError: No request with this id
        """
        request = cls._get_request(FlightCompanionRequest, request_id)
        if request.is_matched:
            cls._log_already_matched(request)
            return []

        offers = (
            FlightCompanionOffer.objects.filter(
                is_available=True,
                flight_number=request.flight_number,
                flight_date__date=timezone.localtime(request.flight_date).date(),
                departure_airport=request.departure_airport,
                arrival_airport=request.arrival_airport,
            )
            .select_related("user")
            .order_by("requested_amount_cents", "created_at")
        )
        return list(offers)

    @classmethod
    def find_pickup_matches(cls, request_id: uuid.UUID | str) -> list[PickupOffer]:
        """
        Offers at the request's airport that can carry the party.

        Raises:
            NotFoundError: No request with this id
        """
        request = cls._get_request(PickupRequest, request_id)
        if request.is_matched:
            cls._log_already_matched(request)
            return []

        offers = PickupOffer.objects.filter(
            is_available=True,
            airport=request.airport,
            max_passengers__gte=request.passenger_count,
        )
        if request.has_luggage:
            offers = offers.filter(can_handle_luggage=True)

        return list(
            offers.select_related("user").order_by("base_rate_cents", "created_at")
        )

    @staticmethod
    def _get_request(model, request_id):
        try:
            request_id = uuid.UUID(str(request_id))
        except ValueError:
            request = None
        else:
            request = model.objects.filter(id=request_id).first()
        if request is None:
            raise NotFoundError(
                "Request not found",
                error_code="REQUEST_NOT_FOUND",
                details={"request_id": str(request_id)},
            )
        return request

    @classmethod
    def _log_already_matched(cls, request) -> None:
        cls.get_logger().warning(
            "Request already matched, no candidates returned",
            extra={"request_id": str(request.id), "state": request.state},
        )
