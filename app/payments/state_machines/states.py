"""
State enums for payment models.

These are Django TextChoices for database storage and admin integration,
driven by django-fsm transitions on the models.

State Machines Overview:

Payment Status:
    created → held_in_escrow → released
    created → held_in_escrow → refunded

Escrow Status:
    held → released
    held → refunded

Dispute Status:
    open → resolved_released | resolved_refunded | rejected
"""

from django.db import models


class PaymentStatus(models.TextChoices):
    """
    States for the Payment lifecycle.

    Terminal states: RELEASED, REFUNDED

    A payment is created when a match is confirmed and immediately moved
    to HELD_IN_ESCROW once the gateway authorises the amount. Status only
    ever moves forward.
    """

    CREATED = "created", "Created"
    HELD_IN_ESCROW = "held_in_escrow", "Held in Escrow"
    RELEASED = "released", "Released"
    REFUNDED = "refunded", "Refunded"

    @classmethod
    def terminal_states(cls) -> frozenset[str]:
        return frozenset({cls.RELEASED, cls.REFUNDED})


class EscrowStatus(models.TextChoices):
    """
    States for the Escrow hold record.

    Terminal states: RELEASED, REFUNDED
    """

    HELD = "held", "Held"
    RELEASED = "released", "Released"
    REFUNDED = "refunded", "Refunded"


class RequestType(models.TextChoices):
    """Which marketplace a payment belongs to."""

    FLIGHT_COMPANION = "flight_companion", "Flight Companion"
    PICKUP = "pickup", "Airport Pickup"


class DisputeStatus(models.TextChoices):
    """
    States for a payment dispute.

    Terminal states: RESOLVED_RELEASED, RESOLVED_REFUNDED, REJECTED

    While a dispute is OPEN the escrow cannot be released by the service
    completion flow; only an admin resolution moves the money.
    """

    OPEN = "open", "Open"
    RESOLVED_RELEASED = "resolved_released", "Resolved - Released to Helper"
    RESOLVED_REFUNDED = "resolved_refunded", "Resolved - Refunded to Traveler"
    REJECTED = "rejected", "Rejected"


class DisputeResolution(models.TextChoices):
    """Admin decision when resolving a dispute."""

    RELEASE = "release", "Release funds to helper"
    REFUND = "refund", "Refund traveler"
    REJECT = "reject", "Reject dispute"
