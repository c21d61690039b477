"""
DRF serializers for marketplace app.

This module provides serializers for:
- Flight companion and pickup requests/offers (read + create/update)
- Match confirmation and service completion inputs
- Flight companion search query parameters
- Ratings (read, submit, edit)

Amounts are integers in the smallest currency unit (``*_cents``). Business
rules that need settings (airport whitelist, amount limits, future dates)
are enforced by MarketplaceService so the API and service layer agree.

Related files:
    - models/: Request and offer models
    - views.py: Marketplace API views
"""

from __future__ import annotations

from rest_framework import serializers

from authentication.serializers import UserSerializer
from marketplace.models import (
    FlightCompanionOffer,
    FlightCompanionRequest,
    PickupOffer,
    PickupRequest,
    Rating,
)
from marketplace.models.rating import MAX_SCORE, MIN_SCORE
from payments.serializers import EscrowSerializer, PaymentSerializer
from payments.state_machines import RequestType

REQUEST_READ_ONLY_FIELDS = [
    "id",
    "user",
    "is_active",
    "state",
    "is_matched",
    "matched_offer",
    "matched_at",
    "completed_at",
    "cancelled_at",
    "created_at",
    "updated_at",
]


# =============================================================================
# Flight companion
# =============================================================================


class FlightCompanionRequestSerializer(serializers.ModelSerializer):
    """Flight companion request; writable fields are the traveler's inputs."""

    user = UserSerializer(read_only=True)
    is_matched = serializers.BooleanField(read_only=True)

    class Meta:
        model = FlightCompanionRequest
        fields = [
            "id",
            "user",
            "flight_number",
            "airline",
            "flight_date",
            "departure_airport",
            "arrival_airport",
            "traveler_name",
            "traveler_age",
            "special_needs",
            "offered_amount_cents",
            "additional_notes",
            "is_active",
            "state",
            "is_matched",
            "matched_offer",
            "matched_at",
            "completed_at",
            "cancelled_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = REQUEST_READ_ONLY_FIELDS


class FlightCompanionOfferSerializer(serializers.ModelSerializer):
    """Flight companion offer."""

    user = UserSerializer(read_only=True)

    class Meta:
        model = FlightCompanionOffer
        fields = [
            "id",
            "user",
            "flight_number",
            "airline",
            "flight_date",
            "departure_airport",
            "arrival_airport",
            "available_services",
            "languages",
            "requested_amount_cents",
            "additional_info",
            "is_available",
            "helped_count",
            "created_at",
        ]
        read_only_fields = ["id", "user", "is_available", "helped_count", "created_at"]


class FlightCompanionSearchSerializer(serializers.Serializer):
    """Query parameters for GET search-requests/ (all optional)."""

    flight_number = serializers.CharField(required=False, allow_blank=True)
    departure_airport = serializers.CharField(required=False, allow_blank=True)
    arrival_airport = serializers.CharField(required=False, allow_blank=True)
    flight_date = serializers.DateField(required=False)


# =============================================================================
# Pickup
# =============================================================================


class PickupSearchSerializer(serializers.Serializer):
    """Query parameters for GET search-requests/ on the pickup side."""

    flight_number = serializers.CharField(required=False, allow_blank=True)
    airport = serializers.CharField(required=False, allow_blank=True)
    arrival_date = serializers.DateField(required=False)


class PickupRequestSerializer(serializers.ModelSerializer):
    """Airport pickup request."""

    user = UserSerializer(read_only=True)
    is_matched = serializers.BooleanField(read_only=True)

    class Meta:
        model = PickupRequest
        fields = [
            "id",
            "user",
            "flight_number",
            "arrival_date",
            "airport",
            "destination_address",
            "passenger_name",
            "passenger_phone",
            "passenger_count",
            "has_luggage",
            "offered_amount_cents",
            "special_requests",
            "is_active",
            "state",
            "is_matched",
            "matched_offer",
            "matched_at",
            "completed_at",
            "cancelled_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = REQUEST_READ_ONLY_FIELDS


class PickupOfferSerializer(serializers.ModelSerializer):
    """Airport pickup offer."""

    user = UserSerializer(read_only=True)

    class Meta:
        model = PickupOffer
        fields = [
            "id",
            "user",
            "airport",
            "vehicle_type",
            "max_passengers",
            "can_handle_luggage",
            "service_area",
            "base_rate_cents",
            "languages",
            "additional_info",
            "is_available",
            "total_pickups",
            "created_at",
        ]
        read_only_fields = ["id", "user", "is_available", "total_pickups", "created_at"]


# =============================================================================
# Match / completion inputs
# =============================================================================


class _AliasedInputSerializer(serializers.Serializer):
    """
    Accepts PascalCase keys (``RequestId``, ``OfferId``) as aliases for the
    snake_case fields, for clients written against the older API.
    """

    aliases = {"RequestId": "request_id", "OfferId": "offer_id"}

    def to_internal_value(self, data):
        if hasattr(data, "items"):
            data = {self.aliases.get(key, key): value for key, value in data.items()}
        return super().to_internal_value(data)


class MatchConfirmSerializer(_AliasedInputSerializer):
    """Body of PUT match/."""

    request_id = serializers.UUIDField()
    offer_id = serializers.UUIDField()


class CompleteServiceSerializer(_AliasedInputSerializer):
    """Body of POST complete-service/."""

    request_id = serializers.UUIDField()


class MatchResultSerializer(serializers.Serializer):
    """
    Response of PUT match/.

    request/offer are rendered by the marketplace's own serializers, passed
    in context as request_serializer_class/offer_serializer_class.
    """

    request = serializers.SerializerMethodField()
    offer = serializers.SerializerMethodField()
    payment = PaymentSerializer(read_only=True)
    escrow = EscrowSerializer(read_only=True)

    def get_request(self, obj) -> dict:
        return self.context["request_serializer_class"](obj.request).data

    def get_offer(self, obj) -> dict:
        return self.context["offer_serializer_class"](obj.offer).data


# =============================================================================
# Ratings
# =============================================================================


class RatingSerializer(serializers.ModelSerializer):
    rater = UserSerializer(read_only=True)
    rated_user = UserSerializer(read_only=True)

    class Meta:
        model = Rating
        fields = [
            "id",
            "rater",
            "rated_user",
            "request_type",
            "request_id",
            "score",
            "comment",
            "is_public",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class RatingCreateSerializer(_AliasedInputSerializer):
    """Body of POST /api/ratings/."""

    aliases = {"RequestId": "request_id", "RequestType": "request_type"}

    request_type = serializers.ChoiceField(choices=RequestType.choices)
    request_id = serializers.UUIDField()
    score = serializers.IntegerField(min_value=MIN_SCORE, max_value=MAX_SCORE)
    comment = serializers.CharField(
        max_length=500, required=False, allow_blank=True, default=""
    )
    is_public = serializers.BooleanField(required=False, default=True)


class RatingUpdateSerializer(serializers.Serializer):
    """Body of PATCH /api/ratings/{id}/."""

    score = serializers.IntegerField(
        min_value=MIN_SCORE, max_value=MAX_SCORE, required=False
    )
    comment = serializers.CharField(max_length=500, required=False, allow_blank=True)
    is_public = serializers.BooleanField(required=False)


class UserRatingSummarySerializer(serializers.Serializer):
    average_score = serializers.FloatField(allow_null=True)
    total_ratings = serializers.IntegerField()
