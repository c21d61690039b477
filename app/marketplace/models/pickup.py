"""
Airport pickup request and offer.
"""

from __future__ import annotations

from django.core.validators import MinValueValidator
from django.db import models

from marketplace.models.base import ServiceOffer, ServiceRequest


class PickupOffer(ServiceOffer):
    """Driver offering pickups at an airport."""

    airport = models.CharField(max_length=3, db_index=True)
    vehicle_type = models.CharField(
        max_length=100,
        blank=True,
        default="",
        help_text='e.g. "Sedan", "SUV", "Van"',
    )
    max_passengers = models.PositiveSmallIntegerField(
        default=4,
        validators=[MinValueValidator(1)],
    )
    can_handle_luggage = models.BooleanField(default=True)
    service_area = models.CharField(
        max_length=200,
        blank=True,
        default="",
        help_text='e.g. "Auckland City", "North Shore"',
    )
    base_rate_cents = models.PositiveIntegerField(default=0)
    total_pickups = models.PositiveIntegerField(default=0)

    class Meta(ServiceOffer.Meta):
        verbose_name = "Pickup offer"
        verbose_name_plural = "Pickup offers"

    def __str__(self) -> str:
        return f"PickupOffer({self.airport}, {self.vehicle_type or 'vehicle'})"


class PickupRequest(ServiceRequest):
    """Traveler needing a ride from the airport."""

    arrival_date = models.DateTimeField()
    airport = models.CharField(max_length=3, db_index=True)
    destination_address = models.CharField(max_length=200)
    passenger_name = models.CharField(max_length=100, blank=True, default="")
    passenger_phone = models.CharField(max_length=20, blank=True, default="")
    passenger_count = models.PositiveSmallIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
    )
    has_luggage = models.BooleanField(default=True)
    special_requests = models.CharField(max_length=500, blank=True, default="")

    matched_offer = models.ForeignKey(
        PickupOffer,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="matched_requests",
    )

    class Meta(ServiceRequest.Meta):
        verbose_name = "Pickup request"
        verbose_name_plural = "Pickup requests"

    def __str__(self) -> str:
        return f"PickupRequest({self.flight_number} at {self.airport}, {self.state})"
