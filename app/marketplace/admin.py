"""
Marketplace admin configuration.

Matching state (state, matched_offer, is_available) is changed only by
MatchConfirmationService and ServiceCompletionService; it is read-only here.
"""

from django.contrib import admin

from marketplace.models import (
    FlightCompanionOffer,
    FlightCompanionRequest,
    PickupOffer,
    PickupRequest,
    Rating,
)

REQUEST_READONLY = [
    "id",
    "state",
    "matched_offer",
    "matched_at",
    "completed_at",
    "cancelled_at",
    "created_at",
    "updated_at",
]


@admin.register(FlightCompanionRequest)
class FlightCompanionRequestAdmin(admin.ModelAdmin):
    list_display = [
        "flight_number",
        "flight_date",
        "departure_airport",
        "arrival_airport",
        "user",
        "offered_amount_cents",
        "state",
        "is_active",
    ]
    list_filter = ["state", "is_active", "departure_airport", "arrival_airport"]
    search_fields = ["id", "flight_number", "airline", "user__email"]
    readonly_fields = REQUEST_READONLY
    raw_id_fields = ["user"]


@admin.register(FlightCompanionOffer)
class FlightCompanionOfferAdmin(admin.ModelAdmin):
    list_display = [
        "flight_number",
        "flight_date",
        "departure_airport",
        "arrival_airport",
        "user",
        "requested_amount_cents",
        "is_available",
        "helped_count",
    ]
    list_filter = ["is_available", "departure_airport", "arrival_airport"]
    search_fields = ["id", "flight_number", "airline", "user__email"]
    readonly_fields = ["id", "is_available", "helped_count", "created_at", "updated_at"]
    raw_id_fields = ["user"]


@admin.register(PickupRequest)
class PickupRequestAdmin(admin.ModelAdmin):
    list_display = [
        "flight_number",
        "arrival_date",
        "airport",
        "user",
        "passenger_count",
        "offered_amount_cents",
        "state",
        "is_active",
    ]
    list_filter = ["state", "is_active", "airport", "has_luggage"]
    search_fields = ["id", "flight_number", "destination_address", "user__email"]
    readonly_fields = REQUEST_READONLY
    raw_id_fields = ["user"]


@admin.register(PickupOffer)
class PickupOfferAdmin(admin.ModelAdmin):
    list_display = [
        "airport",
        "vehicle_type",
        "user",
        "max_passengers",
        "base_rate_cents",
        "is_available",
        "total_pickups",
    ]
    list_filter = ["is_available", "airport", "can_handle_luggage"]
    search_fields = ["id", "service_area", "user__email"]
    readonly_fields = ["id", "is_available", "total_pickups", "created_at", "updated_at"]
    raw_id_fields = ["user"]


@admin.register(Rating)
class RatingAdmin(admin.ModelAdmin):
    list_display = ["rated_user", "rater", "score", "request_type", "is_public", "created_at"]
    list_filter = ["score", "request_type", "is_public"]
    search_fields = ["id", "request_id", "rater__email", "rated_user__email"]
    readonly_fields = ["id", "rater", "rated_user", "request_type", "request_id", "created_at", "updated_at"]
