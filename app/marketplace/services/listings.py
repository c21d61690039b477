"""
Request and offer management for both marketplaces.

Usage:
    from marketplace.services import MarketplaceService
    from payments.state_machines import RequestType

    request = MarketplaceService.create_request(
        RequestType.FLIGHT_COMPANION, user, serializer.validated_data
    )
    MarketplaceService.update_request(request, user, {"additional_notes": "Aisle seat"})
    MarketplaceService.deactivate_request(request, user)
"""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING, Any

from django.db.models import QuerySet

from core.exceptions import ConflictError, PermissionDeniedError
from core.services import BaseService

from marketplace.models import (
    FlightCompanionOffer,
    FlightCompanionRequest,
    PickupOffer,
    PickupRequest,
)
from marketplace.services.kinds import MARKETPLACES
from marketplace.state_machines import RequestState
from marketplace.validators import (
    max_flight_companion_amount,
    max_pickup_amount,
    validate_airport,
    validate_amount,
    validate_future_date,
)

if TYPE_CHECKING:
    from authentication.models import User

    from marketplace.models import ServiceOffer, ServiceRequest


# Per model: (date field, airport fields, amount field, max amount callable)
_RULES = {
    FlightCompanionRequest: (
        "flight_date",
        ("departure_airport", "arrival_airport"),
        "offered_amount_cents",
        max_flight_companion_amount,
    ),
    FlightCompanionOffer: (
        "flight_date",
        ("departure_airport", "arrival_airport"),
        "requested_amount_cents",
        max_flight_companion_amount,
    ),
    PickupRequest: (
        "arrival_date",
        ("airport",),
        "offered_amount_cents",
        max_pickup_amount,
    ),
    PickupOffer: (None, ("airport",), "base_rate_cents", max_pickup_amount),
}


class MarketplaceService(BaseService):
    """Creation, edits, withdrawal and search of requests and offers."""

    # =========================================================================
    # Requests
    # =========================================================================

    @classmethod
    def create_request(
        cls, kind: str, user: User, data: dict[str, Any]
    ) -> ServiceRequest:
        """
        Post a new request for the given marketplace.

        Raises:
            ValidationError: Past date, unsupported airport, amount out of range
        """
        model = MARKETPLACES[kind].request_model
        cleaned = cls._validate(model, data)
        request = model.objects.create(user=user, **cleaned)

        cls.get_logger().info(
            "Request created",
            extra={
                "request_type": kind,
                "request_id": str(request.id),
                "user_id": user.id,
            },
        )
        return request

    @classmethod
    def update_request(
        cls, request: ServiceRequest, user: User, data: dict[str, Any]
    ) -> ServiceRequest:
        """
        Edit a request while it is still open.

        Raises:
            PermissionDeniedError: user does not own the request
            ConflictError: request is no longer open (ALREADY_MATCHED)
            ValidationError: New values break a business rule
        """
        cls._check_owner(request, user)
        cls._check_open(request)

        cleaned = cls._validate(type(request), data, partial=True)
        with cls.atomic():
            locked = type(request).objects.select_for_update().get(id=request.id)
            cls._check_open(locked)
            for field, value in cleaned.items():
                setattr(locked, field, value)
            locked.save()

        return locked

    @classmethod
    def deactivate_request(cls, request: ServiceRequest, user: User) -> None:
        """
        Withdraw a request (soft delete).

        Raises:
            PermissionDeniedError: user does not own the request
            ConflictError: request is already matched
        """
        cls._check_owner(request, user)
        cls._check_open(request)

        updated = type(request).objects.filter(
            id=request.id, state=RequestState.OPEN
        ).update(is_active=False)
        if updated == 0:
            raise ConflictError(
                "Request is already matched",
                error_code="ALREADY_MATCHED",
                details={"request_id": str(request.id)},
            )

        cls.get_logger().info(
            "Request deactivated",
            extra={"request_id": str(request.id), "user_id": user.id},
        )

    @classmethod
    def active_requests(cls, kind: str) -> QuerySet:
        """Visible, unmatched requests, soonest first."""
        model = MARKETPLACES[kind].request_model
        date_field = _RULES[model][0]
        return (
            model.objects.filter(is_active=True, state=RequestState.OPEN)
            .select_related("user")
            .order_by(date_field, "created_at")
        )

    @classmethod
    def requests_for_user(cls, kind: str, user: User) -> QuerySet:
        """Every request the user posted, including matched and withdrawn ones."""
        model = MARKETPLACES[kind].request_model
        return (
            model.objects.filter(user=user)
            .select_related("user")
            .order_by("-created_at")
        )

    @classmethod
    def search_flight_companion_requests(
        cls,
        flight_number: str | None = None,
        departure_airport: str | None = None,
        arrival_airport: str | None = None,
        flight_date: datetime.date | None = None,
    ) -> QuerySet[FlightCompanionRequest]:
        """
        Search open requests.

        Text filters are case-insensitive "contains"; flight_date matches
        the calendar date exactly.
        """
        queryset = FlightCompanionRequest.objects.filter(
            is_active=True, state=RequestState.OPEN
        )
        if flight_number:
            queryset = queryset.filter(flight_number__icontains=flight_number.strip())
        if departure_airport:
            queryset = queryset.filter(
                departure_airport__icontains=departure_airport.strip()
            )
        if arrival_airport:
            queryset = queryset.filter(arrival_airport__icontains=arrival_airport.strip())
        if flight_date:
            queryset = queryset.filter(flight_date__date=flight_date)

        return queryset.select_related("user").order_by("flight_date", "created_at")

    @classmethod
    def search_pickup_requests(
        cls,
        flight_number: str | None = None,
        airport: str | None = None,
        arrival_date: datetime.date | None = None,
    ) -> QuerySet[PickupRequest]:
        """Search open pickup requests; same matching rules as the flight search."""
        queryset = PickupRequest.objects.filter(is_active=True, state=RequestState.OPEN)
        if flight_number:
            queryset = queryset.filter(flight_number__icontains=flight_number.strip())
        if airport:
            queryset = queryset.filter(airport__icontains=airport.strip())
        if arrival_date:
            queryset = queryset.filter(arrival_date__date=arrival_date)

        return queryset.select_related("user").order_by("arrival_date", "created_at")

    @classmethod
    def pickup_requests_by_airport(cls, airport: str) -> QuerySet[PickupRequest]:
        """Open pickup requests at an airport, by arrival date."""
        return (
            PickupRequest.objects.filter(
                is_active=True,
                state=RequestState.OPEN,
                airport=airport.strip().upper(),
            )
            .select_related("user")
            .order_by("arrival_date", "created_at")
        )

    # =========================================================================
    # Offers
    # =========================================================================

    @classmethod
    def create_offer(cls, kind: str, user: User, data: dict[str, Any]) -> ServiceOffer:
        """
        Post a new offer for the given marketplace.

        Raises:
            ValidationError: Past date, unsupported airport, amount out of range
        """
        model = MARKETPLACES[kind].offer_model
        cleaned = cls._validate(model, data)
        offer = model.objects.create(user=user, **cleaned)

        cls.get_logger().info(
            "Offer created",
            extra={
                "request_type": kind,
                "offer_id": str(offer.id),
                "user_id": user.id,
            },
        )
        return offer

    @classmethod
    def available_offers(cls, kind: str) -> QuerySet:
        model = MARKETPLACES[kind].offer_model
        return (
            model.objects.filter(is_available=True)
            .select_related("user")
            .order_by("-created_at")
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _validate(model, data: dict[str, Any], partial: bool = False) -> dict[str, Any]:
        date_field, airport_fields, amount_field, max_amount = _RULES[model]
        cleaned = dict(data)

        if date_field and (date_field in cleaned or not partial):
            validate_future_date(cleaned.get(date_field), date_field)

        for field in airport_fields:
            if field in cleaned or not partial:
                cleaned[field] = validate_airport(cleaned.get(field), field)

        if amount_field in cleaned or not partial:
            validate_amount(cleaned.get(amount_field, 0), max_amount(), amount_field)

        return cleaned

    @staticmethod
    def _check_owner(request: ServiceRequest, user: User) -> None:
        if request.user_id != user.id:
            raise PermissionDeniedError(
                "Only the traveler who posted the request can change it"
            )

    @staticmethod
    def _check_open(request: ServiceRequest) -> None:
        if request.state != RequestState.OPEN:
            raise ConflictError(
                "Request is already matched",
                error_code="ALREADY_MATCHED",
                details={"request_id": str(request.id), "state": request.state},
            )
