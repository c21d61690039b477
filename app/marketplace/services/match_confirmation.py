"""
Match confirmation: request + offer + payment in one transaction.

    1. request  open -> matched          (conditional UPDATE ... WHERE state='open')
    2. offer    is_available -> False    (conditional UPDATE ... WHERE is_available)
    3. Payment created for offered_amount_cents, read back after step 1
    4. EscrowPaymentService.hold_funds(payment)

All four steps run inside a single transaction.atomic() block. If any step
fails (lost race, card declined, gateway timeout) nothing is committed:
the request stays open, the offer stays available and no payment exists.
The confirmation email is queued only after the commit.

Usage:
    from marketplace.services import MatchConfirmationService

    result = MatchConfirmationService.confirm_flight_companion_match(
        request_id, offer_id, actor=request.user
    )
    result.payment.status  # "held_in_escrow"
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING

from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from core.exceptions import ConflictError, NotFoundError, PermissionDeniedError
from core.services import BaseService
from payments.models import Escrow, Payment
from payments.services import EscrowPaymentService

from marketplace.services.kinds import FLIGHT_COMPANION, PICKUP, Marketplace
from marketplace.state_machines import RequestState
from marketplace.tasks import send_match_confirmation_email

if TYPE_CHECKING:
    from authentication.models import User


@dataclass(frozen=True)
class MatchResult:
    """Everything a confirmed match produced, reloaded after commit."""

    request: object
    offer: object
    payment: Payment
    escrow: Escrow


class MatchConfirmationService(BaseService):
    """
    Confirms a traveler's choice of offer.

    Concurrency:
        The request and offer flags are flipped with conditional UPDATEs,
        so of two concurrent confirmations touching the same request or
        offer exactly one sees a row count of 1; the other raises
        ConflictError and its transaction rolls back. The unique
        (request_type, request_id) constraint on Payment backs this up.
    """

    escrow_service_class = EscrowPaymentService

    @classmethod
    def confirm_flight_companion_match(
        cls,
        request_id: uuid.UUID | str,
        offer_id: uuid.UUID | str,
        *,
        actor: User | None = None,
        escrow_service: EscrowPaymentService | None = None,
    ) -> MatchResult:
        return cls._confirm(FLIGHT_COMPANION, request_id, offer_id, actor, escrow_service)

    @classmethod
    def confirm_pickup_match(
        cls,
        request_id: uuid.UUID | str,
        offer_id: uuid.UUID | str,
        *,
        actor: User | None = None,
        escrow_service: EscrowPaymentService | None = None,
    ) -> MatchResult:
        return cls._confirm(PICKUP, request_id, offer_id, actor, escrow_service)

    @classmethod
    def _confirm(
        cls,
        market: Marketplace,
        request_id,
        offer_id,
        actor,
        escrow_service,
    ) -> MatchResult:
        """
        Raises:
            NotFoundError: Request or offer does not exist
            PermissionDeniedError: actor is neither the request owner nor staff
            ConflictError: ALREADY_MATCHED, OFFER_UNAVAILABLE or REQUEST_INACTIVE
            StripeError: The escrow hold failed (nothing committed)
        """
        logger = cls.get_logger()
        escrow_service = escrow_service or cls.escrow_service_class()

        request = market.request_model.objects.filter(id=request_id).first()
        if request is None:
            raise NotFoundError(
                "Request not found",
                error_code="REQUEST_NOT_FOUND",
                details={"request_id": str(request_id)},
            )

        offer = market.offer_model.objects.filter(id=offer_id).first()
        if offer is None:
            raise NotFoundError(
                "Offer not found",
                error_code="OFFER_NOT_FOUND",
                details={"offer_id": str(offer_id)},
            )

        if actor is not None and not (actor.is_staff or actor.id == request.user_id):
            raise PermissionDeniedError(
                "Only the traveler who posted the request can confirm a match"
            )

        if not request.is_active:
            raise ConflictError(
                "Request has been withdrawn",
                error_code="REQUEST_INACTIVE",
                details={"request_id": str(request.id)},
            )

        now = timezone.now()
        try:
            with cls.atomic():
                claimed = market.request_model.objects.filter(
                    id=request.id, state=RequestState.OPEN
                ).update(
                    state=RequestState.MATCHED,
                    matched_offer_id=offer.id,
                    matched_at=now,
                    updated_at=now,
                )
                if claimed == 0:
                    raise ConflictError(
                        "Request is already matched",
                        error_code="ALREADY_MATCHED",
                        details={"request_id": str(request.id)},
                    )

                # Row is now locked by the claim; read back what an edit or
                # withdrawal may have changed since the first read.
                amount_cents, is_active = (
                    market.request_model.objects.filter(id=request.id)
                    .values_list("offered_amount_cents", "is_active")
                    .get()
                )
                if not is_active:
                    raise ConflictError(
                        "Request has been withdrawn",
                        error_code="REQUEST_INACTIVE",
                        details={"request_id": str(request.id)},
                    )

                taken = market.offer_model.objects.filter(
                    id=offer.id, is_available=True
                ).update(
                    is_available=False,
                    updated_at=now,
                    **{market.counter_field: F(market.counter_field) + 1},
                )
                if taken == 0:
                    raise ConflictError(
                        "Offer is not available",
                        error_code="OFFER_UNAVAILABLE",
                        details={"offer_id": str(offer.id)},
                    )

                payment = Payment.objects.create(
                    payer_id=request.user_id,
                    receiver_id=offer.user_id,
                    request_type=market.request_type,
                    request_id=request.id,
                    amount_cents=amount_cents,
                )
                escrow = escrow_service.hold_funds(payment.id, payment.amount_cents)

                payment_id = str(payment.id)
                transaction.on_commit(
                    lambda: send_match_confirmation_email.delay(payment_id)
                )
        except IntegrityError as e:
            raise ConflictError(
                "Request is already matched",
                error_code="ALREADY_MATCHED",
                details={"request_id": str(request.id)},
            ) from e

        logger.info(
            "Match confirmed",
            extra={
                "request_type": market.request_type,
                "request_id": str(request.id),
                "offer_id": str(offer.id),
                "payment_id": str(payment.id),
                "escrow_id": str(escrow.id),
                "amount_cents": payment.amount_cents,
            },
        )

        return MatchResult(
            request=market.request_model.objects.select_related("matched_offer").get(
                id=request.id
            ),
            offer=market.offer_model.objects.get(id=offer.id),
            payment=Payment.objects.get(id=payment.id),
            escrow=Escrow.objects.get(id=escrow.id),
        )
