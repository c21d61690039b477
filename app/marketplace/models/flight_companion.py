"""
Flight companion request and offer.

A traveler (often on behalf of elderly parents) asks for someone on the
same flight to help with translation, navigation or transfers; helpers on
that flight offer to do it for a requested amount.
"""

from __future__ import annotations

from django.db import models

from marketplace.models.base import ServiceOffer, ServiceRequest


class FlightCompanionOffer(ServiceOffer):
    """Helper travelling on a given flight."""

    flight_number = models.CharField(max_length=100)
    airline = models.CharField(max_length=50)
    flight_date = models.DateTimeField()
    departure_airport = models.CharField(max_length=3)
    arrival_airport = models.CharField(max_length=3)

    available_services = models.CharField(
        max_length=200,
        blank=True,
        default="",
        help_text='e.g. "Translation, Navigation, General Help"',
    )

    requested_amount_cents = models.PositiveIntegerField(default=0)

    helped_count = models.PositiveIntegerField(
        default=0,
        help_text="Number of matches this helper has accepted",
    )

    class Meta(ServiceOffer.Meta):
        verbose_name = "Flight companion offer"
        verbose_name_plural = "Flight companion offers"
        indexes = [
            models.Index(
                fields=["flight_number", "departure_airport", "arrival_airport"],
                name="fc_offer_route_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"FlightCompanionOffer({self.flight_number} {self.departure_airport}-{self.arrival_airport})"

    def save(self, *args, **kwargs):
        self.flight_number = self.flight_number.strip().upper()
        super().save(*args, **kwargs)


class FlightCompanionRequest(ServiceRequest):
    """Traveler needing help on a given flight."""

    airline = models.CharField(max_length=50)
    flight_date = models.DateTimeField()
    departure_airport = models.CharField(max_length=3)
    arrival_airport = models.CharField(max_length=3)

    traveler_name = models.CharField(
        max_length=100,
        blank=True,
        default="",
        help_text='Who needs help, e.g. "My parents"',
    )
    traveler_age = models.CharField(
        max_length=20,
        blank=True,
        default="",
        help_text='e.g. "Elderly", "Adult"',
    )
    special_needs = models.CharField(max_length=500, blank=True, default="")
    additional_notes = models.TextField(blank=True, default="")

    matched_offer = models.ForeignKey(
        FlightCompanionOffer,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="matched_requests",
    )

    class Meta(ServiceRequest.Meta):
        verbose_name = "Flight companion request"
        verbose_name_plural = "Flight companion requests"
        indexes = [
            models.Index(
                fields=["flight_number", "departure_airport", "arrival_airport"],
                name="fc_request_route_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"FlightCompanionRequest({self.flight_number} {self.departure_airport}-{self.arrival_airport}, {self.state})"
