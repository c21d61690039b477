"""
Abstract request and offer models shared by both marketplaces.

Concrete models:
    - FlightCompanionRequest / FlightCompanionOffer (models/flight_companion.py)
    - PickupRequest / PickupOffer (models/pickup.py)
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils import timezone

from django_fsm import FSMField, transition

from core.models import BaseModel
from core.model_mixins import UUIDPrimaryKeyMixin

from marketplace.state_machines import RequestState


class ServiceRequest(UUIDPrimaryKeyMixin, BaseModel):
    """
    A traveler's request for help.

    Fields:
        user: Traveler who posted the request (pays on match)
        flight_number: Flight the help is for (stored upper case)
        offered_amount_cents: What the traveler pays, smallest currency unit
        is_active: Visibility flag; False hides the request (soft delete)
        state: open -> matched -> completed | cancelled
        matched_at/completed_at/cancelled_at: Transition timestamps

    Subclasses define matched_offer as a FK to their own offer model.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="%(class)ss",
        help_text="Traveler who posted the request",
    )

    flight_number = models.CharField(max_length=100)

    offered_amount_cents = models.PositiveIntegerField(
        default=0,
        help_text="Amount offered in smallest currency unit (e.g., cents)",
    )

    is_active = models.BooleanField(default=True, db_index=True)

    state = FSMField(
        default=RequestState.OPEN,
        choices=RequestState.choices,
        db_index=True,
        protected=True,
        help_text="Current state of the request (managed by FSM)",
    )

    matched_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        abstract = True
        ordering = ["-created_at"]

    def save(self, *args, **kwargs):
        self.flight_number = self.flight_number.strip().upper()
        super().save(*args, **kwargs)

    @property
    def is_matched(self) -> bool:
        return self.state != RequestState.OPEN

    @transition(field="state", source=RequestState.MATCHED, target=RequestState.COMPLETED)
    def complete(self):
        """Transition: MATCHED -> COMPLETED (escrow released)."""
        self.completed_at = timezone.now()

    @transition(field="state", source=RequestState.MATCHED, target=RequestState.CANCELLED)
    def cancel(self):
        """Transition: MATCHED -> CANCELLED (escrow refunded after a dispute)."""
        self.cancelled_at = timezone.now()


class ServiceOffer(UUIDPrimaryKeyMixin, BaseModel):
    """
    A helper's offer to provide a service.

    is_available flips to False exactly once, when the offer is chosen in
    a match; it is never set back.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="%(class)ss",
        help_text="Helper who posted the offer",
    )

    languages = models.CharField(max_length=100, blank=True, default="")
    additional_info = models.TextField(blank=True, default="")
    is_available = models.BooleanField(default=True, db_index=True)

    class Meta:
        abstract = True
        ordering = ["-created_at"]
