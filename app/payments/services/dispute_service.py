"""
Dispute service for contested match payments.

Usage:
    from payments.services import DisputeService
    from payments.state_machines import DisputeResolution

    dispute = DisputeService.open_dispute(payment.id, traveler, "Helper never showed up")
    DisputeService.resolve_dispute(dispute.id, admin, DisputeResolution.REFUND, "Confirmed no-show")
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from django.db import IntegrityError, transaction
from django.db.models import Q

from django_fsm import TransitionNotAllowed

from core.exceptions import ConflictError, PermissionDeniedError
from core.services import BaseService

from payments.exceptions import (
    DisputeNotFoundError,
    InvalidStateTransitionError,
    PaymentNotFoundError,
    PaymentValidationError,
)
from payments.models import Dispute, Escrow, Payment
from payments.services.escrow_service import EscrowPaymentService
from payments.signals import escrow_settled
from payments.state_machines import (
    DisputeResolution,
    DisputeStatus,
    EscrowStatus,
    PaymentStatus,
)

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from authentication.models import User


class DisputeService(BaseService):
    """
    Opens and resolves disputes on escrowed payments.

    While a dispute is open the completion flow refuses to release the
    escrow; resolving with RELEASE or REFUND moves the money through
    EscrowPaymentService. The escrow_settled signal then lets the
    marketplace close the request in the same transaction.
    """

    escrow_service_class = EscrowPaymentService

    @classmethod
    def open_dispute(
        cls,
        payment_id: uuid.UUID | str,
        user: User,
        reason: str,
        evidence_url: str | None = None,
    ) -> Dispute:
        """
        Raise a dispute on a held payment.

        Raises:
            ValidationError: reason is blank
            PaymentNotFoundError: Unknown payment
            PermissionDeniedError: user is neither payer nor receiver
            InvalidStateTransitionError: payment is not held in escrow
            ConflictError: payment already has an open dispute (DISPUTE_OPEN)
        """
        cls.validate_required(reason=reason)
        logger = cls.get_logger()

        with cls.atomic():
            payment = Payment.objects.select_for_update().filter(id=payment_id).first()
            if payment is None:
                raise PaymentNotFoundError(
                    "Payment not found",
                    details={"payment_id": str(payment_id)},
                )

            if user.id not in (payment.payer_id, payment.receiver_id):
                raise PermissionDeniedError(
                    "Only the payer or receiver can dispute this payment"
                )

            if payment.status != PaymentStatus.HELD_IN_ESCROW:
                raise InvalidStateTransitionError(
                    "Only payments held in escrow can be disputed",
                    details={"current_state": payment.status},
                )

            if payment.disputes.filter(status=DisputeStatus.OPEN).exists():
                raise ConflictError(
                    "This payment already has an open dispute",
                    error_code="DISPUTE_OPEN",
                )

            try:
                with transaction.atomic():
                    dispute = Dispute.objects.create(
                        payment=payment,
                        raised_by=user,
                        reason=reason.strip(),
                        evidence_url=evidence_url or "",
                    )
            except IntegrityError as e:
                raise ConflictError(
                    "This payment already has an open dispute",
                    error_code="DISPUTE_OPEN",
                ) from e

        logger.info(
            "Dispute opened",
            extra={
                "dispute_id": str(dispute.id),
                "payment_id": str(payment.id),
                "raised_by": user.id,
            },
        )
        return dispute

    @classmethod
    def resolve_dispute(
        cls,
        dispute_id: uuid.UUID | str,
        admin: User,
        resolution: str,
        notes: str = "",
        escrow_service: EscrowPaymentService | None = None,
    ) -> Dispute:
        """
        Resolve an open dispute (staff only).

        Args:
            dispute_id: Dispute to resolve
            admin: Staff user making the decision
            resolution: DisputeResolution value
            notes: Admin notes stored on the dispute
            escrow_service: Optional escrow service (defaults to the Stripe-backed one)

        Raises:
            PermissionDeniedError: admin is not staff
            DisputeNotFoundError: Unknown dispute
            PaymentValidationError: Unknown resolution
            InvalidStateTransitionError: Dispute is not open, or escrow not held
        """
        if not admin.is_staff:
            raise PermissionDeniedError("Only staff can resolve disputes")

        if resolution not in DisputeResolution.values:
            raise PaymentValidationError(
                "Unknown dispute resolution",
                details={"resolution": resolution},
            )

        escrow_service = escrow_service or cls.escrow_service_class()
        logger = cls.get_logger()

        with cls.atomic():
            dispute = Dispute.objects.select_for_update().filter(id=dispute_id).first()
            if dispute is None:
                raise DisputeNotFoundError(
                    "Dispute not found",
                    details={"dispute_id": str(dispute_id)},
                )

            transitions = {
                DisputeResolution.RELEASE: dispute.resolve_release,
                DisputeResolution.REFUND: dispute.resolve_refund,
                DisputeResolution.REJECT: dispute.reject,
            }
            try:
                transitions[resolution](admin, notes)
            except TransitionNotAllowed as e:
                raise InvalidStateTransitionError(
                    "Dispute is not open",
                    details={"current_state": dispute.status},
                ) from e
            dispute.save()

            if resolution != DisputeResolution.REJECT:
                escrow = Escrow.objects.get(payment_id=dispute.payment_id)
                if resolution == DisputeResolution.RELEASE:
                    escrow_service.release_funds(escrow.id)
                    outcome = EscrowStatus.RELEASED
                else:
                    escrow_service.refund_funds(escrow.id)
                    outcome = EscrowStatus.REFUNDED

                escrow_settled.send(
                    sender=cls,
                    payment=Payment.objects.get(id=dispute.payment_id),
                    outcome=outcome,
                )

        logger.info(
            "Dispute resolved",
            extra={
                "dispute_id": str(dispute.id),
                "payment_id": str(dispute.payment_id),
                "resolution": resolution,
                "resolved_by": admin.id,
            },
        )
        return dispute

    @classmethod
    def list_disputes(cls, user: User) -> QuerySet[Dispute]:
        """Staff see every dispute; other users see the ones they raised."""
        queryset = Dispute.objects.select_related("payment", "raised_by")
        if user.is_staff:
            return queryset
        return queryset.filter(Q(raised_by=user))
