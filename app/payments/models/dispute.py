"""
Dispute model for contested match payments.

A traveler or helper can raise a dispute while the payment is held in
escrow. An open dispute blocks service completion; an admin resolves it by
releasing the funds to the helper, refunding the traveler, or rejecting
the dispute (funds stay held).
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils import timezone

from django_fsm import FSMField, transition

from core.models import BaseModel
from core.model_mixins import UUIDPrimaryKeyMixin

from payments.models.payment import Payment
from payments.state_machines import DisputeStatus


class Dispute(UUIDPrimaryKeyMixin, BaseModel):
    """
    A disagreement about whether a matched service was delivered.

    State Flow:
        OPEN -> RESOLVED_RELEASED
        OPEN -> RESOLVED_REFUNDED
        OPEN -> REJECTED
    """

    payment = models.ForeignKey(
        Payment,
        on_delete=models.PROTECT,
        related_name="disputes",
    )

    raised_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="disputes_raised",
    )

    reason = models.TextField(help_text="Why the payment is disputed")

    evidence_url = models.URLField(
        blank=True,
        default="",
        help_text="Optional link to supporting evidence",
    )

    status = FSMField(
        default=DisputeStatus.OPEN,
        choices=DisputeStatus.choices,
        db_index=True,
        protected=True,
    )

    admin_notes = models.TextField(blank=True, default="")

    resolved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="disputes_resolved",
    )

    resolved_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Dispute"
        verbose_name_plural = "Disputes"
        constraints = [
            models.UniqueConstraint(
                fields=["payment"],
                condition=models.Q(status=DisputeStatus.OPEN),
                name="dispute_one_open_per_payment",
            ),
        ]

    def __str__(self) -> str:
        return f"Dispute({self.id}, {self.status})"

    @property
    def is_open(self) -> bool:
        return self.status == DisputeStatus.OPEN

    def _stamp_resolution(self, admin, notes: str) -> None:
        self.resolved_by = admin
        self.admin_notes = notes
        self.resolved_at = timezone.now()

    @transition(
        field=status,
        source=DisputeStatus.OPEN,
        target=DisputeStatus.RESOLVED_RELEASED,
    )
    def resolve_release(self, admin, notes: str = ""):
        self._stamp_resolution(admin, notes)

    @transition(
        field=status,
        source=DisputeStatus.OPEN,
        target=DisputeStatus.RESOLVED_REFUNDED,
    )
    def resolve_refund(self, admin, notes: str = ""):
        self._stamp_resolution(admin, notes)

    @transition(field=status, source=DisputeStatus.OPEN, target=DisputeStatus.REJECTED)
    def reject(self, admin, notes: str = ""):
        self._stamp_resolution(admin, notes)
