"""
Escrow service for holding and releasing match payments.

Funds are held on the traveler's card with a manual-capture PaymentIntent
when a match is confirmed, captured when the service is completed, and
voided when the payment is refunded.

    hold_funds     Payment CREATED -> HELD_IN_ESCROW, Escrow created HELD
    release_funds  Escrow HELD -> RELEASED, Payment -> RELEASED
    refund_funds   Escrow HELD -> REFUNDED, Payment -> REFUNDED

Usage:
    from payments.services import EscrowPaymentService

    service = EscrowPaymentService()
    escrow = service.hold_funds(payment.id, payment.amount_cents)
    ...
    service.release_funds(escrow.id)

    # Testing with a mock gateway
    service = EscrowPaymentService(gateway=mock_adapter)
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from django.conf import settings
from django.db import transaction

from django_fsm import TransitionNotAllowed

from payments.adapters import (
    CreatePaymentIntentParams,
    IdempotencyKeyGenerator,
    StripeAdapter,
)
from payments.exceptions import (
    EscrowNotFoundError,
    InvalidStateTransitionError,
    PaymentNotFoundError,
    PaymentValidationError,
)
from payments.models import Escrow, Payment
from payments.state_machines import EscrowStatus

if TYPE_CHECKING:
    from typing import Any


logger = logging.getLogger(__name__)


def calculate_platform_fee(amount_cents: int) -> int:
    """
    Platform fee for a released amount, rounded down to whole cents.

    PLATFORM_FEE_PERCENT is a percentage (e.g. 15 means 15%).
    """
    percent = getattr(settings, "PLATFORM_FEE_PERCENT", 0)
    return int(amount_cents * percent) // 100


class EscrowPaymentService:
    """
    Holds, releases and refunds escrowed funds for a Payment.

    Dependency Injection:
        The gateway can be injected for testing. If not provided, uses the
        StripeAdapter class.

    Transactions:
        Every operation runs inside transaction.atomic(). When called from
        an outer atomic block (match confirmation, service completion) a
        failure here rolls back the caller's writes too.
    """

    def __init__(self, gateway: Any | None = None) -> None:
        self.gateway = gateway or StripeAdapter

    # =========================================================================
    # Hold
    # =========================================================================

    def hold_funds(self, payment_id: uuid.UUID | str, amount_cents: int) -> Escrow:
        """
        Reserve funds against a payment.

        Idempotent: a second call for the same payment returns the existing
        escrow without authorising the card again.

        Args:
            payment_id: Payment to hold funds for
            amount_cents: Amount to hold (zero is allowed, no gateway call)

        Returns:
            The Escrow record in HELD state

        Raises:
            PaymentValidationError: amount_cents is negative
            PaymentNotFoundError: No payment with this id
            StripeError: The gateway refused or failed the authorisation
        """
        if amount_cents < 0:
            raise PaymentValidationError(
                "Payment amount cannot be negative",
                details={"amount_cents": amount_cents},
            )

        with transaction.atomic():
            payment = (
                Payment.objects.select_for_update().filter(id=payment_id).first()
            )
            if payment is None:
                raise PaymentNotFoundError(
                    "Payment not found",
                    details={"payment_id": str(payment_id)},
                )

            existing = Escrow.objects.filter(payment=payment).first()
            if existing is not None:
                logger.info(
                    "Funds already held, returning existing escrow (idempotent)",
                    extra={
                        "payment_id": str(payment.id),
                        "escrow_id": str(existing.id),
                    },
                )
                return existing

            intent_id = None
            if amount_cents > 0:
                intent = self.gateway.create_payment_intent(
                    CreatePaymentIntentParams(
                        amount_cents=amount_cents,
                        currency=payment.currency,
                        idempotency_key=IdempotencyKeyGenerator.generate(
                            "hold", payment.id
                        ),
                        metadata={
                            "payment_id": str(payment.id),
                            "request_id": str(payment.request_id),
                            "request_type": payment.request_type,
                        },
                    )
                )
                intent_id = intent.id

            escrow = Escrow.objects.create(
                payment=payment,
                amount_cents=amount_cents,
                currency=payment.currency,
                stripe_payment_intent_id=intent_id,
            )

            self._transition(payment, "hold", target="held_in_escrow")
            payment.stripe_payment_intent_id = intent_id
            payment.save()

        logger.info(
            "Funds held in escrow",
            extra={
                "payment_id": str(payment.id),
                "escrow_id": str(escrow.id),
                "amount_cents": amount_cents,
                "payment_intent_id": intent_id,
            },
        )
        return escrow

    # =========================================================================
    # Release / Refund
    # =========================================================================

    def release_funds(self, escrow_id: uuid.UUID | str) -> Escrow:
        """
        Release held funds to the helper.

        Captures the authorised PaymentIntent, deducts the platform fee and
        moves both the escrow and its payment to RELEASED.

        Raises:
            EscrowNotFoundError: No escrow with this id
            InvalidStateTransitionError: Escrow is not currently held
            StripeError: Capture failed (nothing is changed)
        """
        with transaction.atomic():
            escrow, payment = self._lock_held_escrow(escrow_id, "released")

            if escrow.stripe_payment_intent_id:
                self.gateway.capture_payment_intent(
                    escrow.stripe_payment_intent_id,
                    idempotency_key=IdempotencyKeyGenerator.generate(
                        "release", escrow.id
                    ),
                )

            fee_cents = calculate_platform_fee(escrow.amount_cents)
            self._transition(escrow, "release", target="released")
            self._transition(
                payment, "release", target="released", platform_fee_cents=fee_cents
            )
            escrow.save()
            payment.save()

        logger.info(
            "Escrow released",
            extra={
                "escrow_id": str(escrow.id),
                "payment_id": str(payment.id),
                "amount_cents": escrow.amount_cents,
                "platform_fee_cents": fee_cents,
            },
        )
        return escrow

    def refund_funds(self, escrow_id: uuid.UUID | str) -> Escrow:
        """
        Return held funds to the traveler by voiding the authorisation.

        Raises:
            EscrowNotFoundError: No escrow with this id
            InvalidStateTransitionError: Escrow is not currently held
            StripeError: Cancellation failed (nothing is changed)
        """
        with transaction.atomic():
            escrow, payment = self._lock_held_escrow(escrow_id, "refunded")

            if escrow.stripe_payment_intent_id:
                self.gateway.cancel_payment_intent(
                    escrow.stripe_payment_intent_id,
                    idempotency_key=IdempotencyKeyGenerator.generate(
                        "refund", escrow.id
                    ),
                )

            self._transition(escrow, "refund", target="refunded")
            self._transition(payment, "refund", target="refunded")
            escrow.save()
            payment.save()

        logger.info(
            "Escrow refunded",
            extra={
                "escrow_id": str(escrow.id),
                "payment_id": str(payment.id),
                "amount_cents": escrow.amount_cents,
            },
        )
        return escrow

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _lock_held_escrow(
        escrow_id: uuid.UUID | str, target: str
    ) -> tuple[Escrow, Payment]:
        escrow = (
            Escrow.objects.select_for_update()
            .select_related("payment")
            .filter(id=escrow_id)
            .first()
        )
        if escrow is None:
            raise EscrowNotFoundError(
                "Escrow not found",
                details={"escrow_id": str(escrow_id)},
            )

        if escrow.status != EscrowStatus.HELD:
            logger.warning(
                "Escrow is not held",
                extra={
                    "escrow_id": str(escrow.id),
                    "current_state": escrow.status,
                    "target_state": target,
                },
            )
            raise InvalidStateTransitionError(
                f"Cannot move escrow from {escrow.status} to {target}",
                details={"current_state": escrow.status, "target_state": target},
            )

        payment = Payment.objects.select_for_update().get(id=escrow.payment_id)
        return escrow, payment

    @staticmethod
    def _transition(instance, method: str, *, target: str, **kwargs) -> None:
        """Run an FSM transition, translating TransitionNotAllowed."""
        try:
            getattr(instance, method)(**kwargs)
        except TransitionNotAllowed as e:
            raise InvalidStateTransitionError(
                f"Cannot move {instance.__class__.__name__.lower()} "
                f"from {instance.status} to {target}",
                details={"current_state": instance.status, "target_state": target},
            ) from e
