"""
Service completion: release escrow to the helper.

Called by the traveler once the flight or pickup has happened. Releases
the escrowed funds (capturing the card authorisation), stamps the payment
as completed and moves the request matched -> completed.

settle_request is also reached from a staff dispute resolution (through
the payments escrow_settled signal): a release completes the request, a
refund cancels it.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from django.db import transaction
from django.utils import timezone

from core.exceptions import ConflictError, NotFoundError, PermissionDeniedError
from core.services import BaseService
from payments.models import Payment
from payments.services import EscrowPaymentService
from payments.state_machines import DisputeStatus, EscrowStatus

from marketplace.services.kinds import MARKETPLACES
from marketplace.state_machines import RequestState
from marketplace.tasks import send_service_completion_email

if TYPE_CHECKING:
    from authentication.models import User


class ServiceCompletionService(BaseService):
    escrow_service_class = EscrowPaymentService

    @classmethod
    def complete_service(
        cls,
        request_id: uuid.UUID | str,
        request_type: str,
        *,
        actor: User | None = None,
        escrow_service: EscrowPaymentService | None = None,
    ) -> Payment:
        """
        Release the escrow behind a matched request.

        Args:
            request_id: The matched request
            request_type: RequestType of the request's marketplace
            actor: Caller; must be the paying traveler or staff when given
            escrow_service: Optional escrow service (defaults to the Stripe-backed one)

        Returns:
            The payment, now RELEASED with completed_at set

        Raises:
            NotFoundError: No escrowed payment for this request
            PermissionDeniedError: actor is not the traveler or staff
            ConflictError: An open dispute blocks release (DISPUTE_OPEN)
            InvalidStateTransitionError: Escrow already released or refunded
        """
        market = MARKETPLACES[request_type]
        escrow_service = escrow_service or cls.escrow_service_class()
        logger = cls.get_logger()

        with cls.atomic():
            payment = (
                Payment.objects.select_for_update()
                .filter(
                    request_id=request_id,
                    request_type=market.request_type,
                    escrow__isnull=False,
                )
                .first()
            )
            if payment is None:
                raise NotFoundError(
                    "No escrowed payment found for this request",
                    error_code="PAYMENT_NOT_FOUND",
                    details={"request_id": str(request_id)},
                )

            if actor is not None and not (actor.is_staff or actor.id == payment.payer_id):
                raise PermissionDeniedError(
                    "Only the traveler who paid can complete this service"
                )

            if payment.disputes.filter(status=DisputeStatus.OPEN).exists():
                raise ConflictError(
                    "Payment is under dispute",
                    error_code="DISPUTE_OPEN",
                    details={"payment_id": str(payment.id)},
                )

            escrow_service.release_funds(payment.escrow.id)

            payment = cls.settle_request(
                Payment.objects.get(id=payment.id), EscrowStatus.RELEASED
            )

        logger.info(
            "Service completed, escrow released",
            extra={
                "request_type": market.request_type,
                "request_id": str(request_id),
                "payment_id": str(payment.id),
                "amount_cents": payment.amount_cents,
                "platform_fee_cents": payment.platform_fee_cents,
            },
        )
        return payment

    @classmethod
    def settle_request(cls, payment: Payment, outcome: str) -> Payment:
        """
        Bring the request behind a settled payment to its terminal state.

        Must run inside the transaction that moved the escrow.

        RELEASED: stamps payment.completed_at, request matched -> completed,
        queues the completion email.
        REFUNDED: request matched -> cancelled.

        A request that is no longer MATCHED is left as it is.
        """
        market = MARKETPLACES[payment.request_type]

        if outcome == EscrowStatus.RELEASED and payment.completed_at is None:
            payment.completed_at = timezone.now()
            payment.save(update_fields=["completed_at", "updated_at"])

        request = (
            market.request_model.objects.select_for_update()
            .filter(id=payment.request_id)
            .first()
        )
        if request is not None and request.state == RequestState.MATCHED:
            if outcome == EscrowStatus.RELEASED:
                request.complete()
            else:
                request.cancel()
            request.save()

        if outcome == EscrowStatus.RELEASED:
            payment_id = str(payment.id)
            transaction.on_commit(
                lambda: send_service_completion_email.delay(payment_id)
            )

        cls.get_logger().info(
            "Request settled",
            extra={
                "request_type": payment.request_type,
                "request_id": str(payment.request_id),
                "payment_id": str(payment.id),
                "outcome": outcome,
                "request_state": request.state if request is not None else None,
            },
        )
        return payment
