"""
Payment and Escrow models for match payments.

A Payment is created when a traveler confirms a match with a helper. Its
Escrow sub-record tracks the funds authorised on the traveler's card until
the service is completed (release) or cancelled/disputed (refund).

Usage:
    from payments.models import Payment, Escrow
    from payments.state_machines import RequestType

    payment = Payment.objects.create(
        payer=traveler,
        receiver=helper,
        request_type=RequestType.FLIGHT_COMPANION,
        request_id=flight_request.id,
        amount_cents=5000,
    )

    # State transitions using django-fsm
    payment.hold()  # created -> held_in_escrow
    payment.save()
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils import timezone

from django_fsm import FSMField, transition

from core.models import BaseModel
from core.model_mixins import UUIDPrimaryKeyMixin, VersionedMixin

from payments.state_machines import EscrowStatus, PaymentStatus, RequestType


def default_currency() -> str:
    return getattr(settings, "PAYMENT_DEFAULT_CURRENCY", "nzd")


class Payment(UUIDPrimaryKeyMixin, VersionedMixin, BaseModel):
    """
    Payment for one confirmed match.

    State Flow:
        CREATED -> HELD_IN_ESCROW -> RELEASED
        CREATED -> HELD_IN_ESCROW -> REFUNDED

    Fields:
        payer: Traveler who posted the request
        receiver: Helper who posted the offer
        request_type/request_id: The matched request (exactly one payment each)
        amount_cents: The request's offered amount
        currency: ISO 4217 currency code (lowercase)
        status: Current FSM state (protected, only transitions may change it)
        stripe_payment_intent_id: Manual-capture PaymentIntent behind the hold
        platform_fee_cents: Fee kept by the platform, set on release
        *_at timestamps: Track state transition times
        completed_at: When the helper's service was marked complete
    """

    payer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="payments_made",
        help_text="Traveler paying for the service",
    )

    receiver = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="payments_received",
        help_text="Helper receiving the payment on release",
    )

    request_type = models.CharField(
        max_length=32,
        choices=RequestType.choices,
        help_text="Marketplace the matched request belongs to",
    )

    request_id = models.UUIDField(
        db_index=True,
        help_text="UUID of the matched request",
    )

    amount_cents = models.PositiveBigIntegerField(
        help_text="Payment amount in smallest currency unit (e.g., cents)",
    )

    currency = models.CharField(
        max_length=3,
        default=default_currency,
        help_text="ISO 4217 currency code (lowercase)",
    )

    status = FSMField(
        default=PaymentStatus.CREATED,
        choices=PaymentStatus.choices,
        db_index=True,
        protected=True,
        help_text="Current state of the payment (managed by FSM)",
    )

    stripe_payment_intent_id = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        unique=True,
        help_text="Stripe PaymentIntent ID (pi_xxx)",
    )

    platform_fee_cents = models.PositiveBigIntegerField(
        default=0,
        help_text="Platform fee deducted when funds are released",
    )

    held_at = models.DateTimeField(null=True, blank=True)
    released_at = models.DateTimeField(null=True, blank=True)
    refunded_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the service was marked complete",
    )

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Payment"
        verbose_name_plural = "Payments"
        indexes = [
            models.Index(
                fields=["payer", "created_at"],
                name="payment_payer_created_idx",
            ),
            models.Index(
                fields=["receiver", "created_at"],
                name="payment_receiver_created_idx",
            ),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["request_type", "request_id"],
                name="payment_unique_per_request",
            ),
        ]

    def __str__(self) -> str:
        amount_display = f"{self.amount_cents / 100:.2f} {self.currency.upper()}"
        return f"Payment({self.id}, {self.status}, {amount_display})"

    @property
    def receiver_amount_cents(self) -> int:
        """Amount the helper receives after the platform fee."""
        return self.amount_cents - self.platform_fee_cents

    # ==========================================================================
    # State Transitions (django-fsm)
    # ==========================================================================

    @transition(
        field=status,
        source=PaymentStatus.CREATED,
        target=PaymentStatus.HELD_IN_ESCROW,
    )
    def hold(self):
        """Transition: CREATED -> HELD_IN_ESCROW."""
        self.held_at = timezone.now()

    @transition(
        field=status,
        source=PaymentStatus.HELD_IN_ESCROW,
        target=PaymentStatus.RELEASED,
    )
    def release(self, platform_fee_cents: int = 0):
        """
        Transition: HELD_IN_ESCROW -> RELEASED

        Called when the traveler confirms the service was delivered.
        """
        self.platform_fee_cents = platform_fee_cents
        self.released_at = timezone.now()

    @transition(
        field=status,
        source=PaymentStatus.HELD_IN_ESCROW,
        target=PaymentStatus.REFUNDED,
    )
    def refund(self):
        """Transition: HELD_IN_ESCROW -> REFUNDED."""
        self.refunded_at = timezone.now()


class Escrow(UUIDPrimaryKeyMixin, VersionedMixin, BaseModel):
    """
    Funds held for a payment until the service is completed.

    Lifecycle:
        1. Match confirmed, Payment created
        2. Gateway authorises the amount, Escrow created in HELD
        3. Service completed -> RELEASED (or dispute/refund -> REFUNDED)

    Fields:
        payment: The Payment these funds belong to (one escrow per payment)
        amount_cents: Amount held in smallest currency unit
        currency: ISO 4217 currency code
        status: Current FSM state
        stripe_payment_intent_id: Authorised PaymentIntent (None for zero amounts)
    """

    payment = models.OneToOneField(
        Payment,
        on_delete=models.PROTECT,
        related_name="escrow",
        help_text="Payment this hold belongs to",
    )

    amount_cents = models.PositiveBigIntegerField(
        help_text="Amount held in smallest currency unit (e.g., cents)",
    )

    currency = models.CharField(
        max_length=3,
        default=default_currency,
        help_text="ISO 4217 currency code (lowercase)",
    )

    status = FSMField(
        default=EscrowStatus.HELD,
        choices=EscrowStatus.choices,
        db_index=True,
        protected=True,
        help_text="Current state of the hold (managed by FSM)",
    )

    stripe_payment_intent_id = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        help_text="Stripe PaymentIntent ID authorised for this hold",
    )

    released_at = models.DateTimeField(null=True, blank=True)
    refunded_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Escrow"
        verbose_name_plural = "Escrows"

    def __str__(self) -> str:
        amount_display = f"{self.amount_cents / 100:.2f} {self.currency.upper()}"
        return f"Escrow({self.id}, {amount_display}, {self.status})"

    @transition(field=status, source=EscrowStatus.HELD, target=EscrowStatus.RELEASED)
    def release(self):
        self.released_at = timezone.now()

    @transition(field=status, source=EscrowStatus.HELD, target=EscrowStatus.REFUNDED)
    def refund(self):
        self.refunded_at = timezone.now()
