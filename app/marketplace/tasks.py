"""
Celery tasks for marketplace notification emails.

Tasks:
    send_match_confirmation_email: Both parties, after a match commits
    send_service_completion_email: Both parties, after escrow is released
    send_party_email: One notification to one party

Design:
    - Tasks receive payment_id (UUID string), queued with
      transaction.on_commit so they never see uncommitted rows
    - The two notification tasks fan out one send_party_email per party,
      so a retry only resends to the party whose delivery failed
    - A missing payment is logged and the task returns False (no retry)
    - Mail backend failures raise and are retried with backoff

Usage:
    from marketplace.tasks import send_match_confirmation_email

    send_match_confirmation_email.delay(str(payment.id))
"""

from __future__ import annotations

import logging

from celery import shared_task

from payments.models import Payment
from toolkit.services import EmailService

logger = logging.getLogger(__name__)

PAYER = "payer"
RECEIVER = "receiver"

# notification -> (subject format, template name)
NOTIFICATIONS = {
    "match_confirmation": (
        "Your {service_name} match is confirmed",
        "marketplace/match_confirmation",
    ),
    "service_completion": (
        "Your {service_name} service is complete",
        "marketplace/service_completion",
    ),
}


def _get_payment(payment_id: str) -> Payment | None:
    payment = (
        Payment.objects.select_related("payer", "receiver")
        .filter(id=payment_id)
        .first()
    )
    if payment is None:
        logger.warning("Payment not found for email", extra={"payment_id": payment_id})
    return payment


def _notify_both_parties(payment_id: str, notification: str) -> bool:
    if not Payment.objects.filter(id=payment_id).exists():
        logger.warning("Payment not found for email", extra={"payment_id": payment_id})
        return False

    for party in (PAYER, RECEIVER):
        send_party_email.delay(payment_id, notification, party)

    logger.info(
        "Notification emails queued",
        extra={"payment_id": payment_id, "notification": notification},
    )
    return True


@shared_task(
    bind=True,
    autoretry_for=(Exception,),
    retry_backoff=True,
    retry_kwargs={"max_retries": 3},
)
def send_party_email(self, payment_id: str, notification: str, party: str) -> bool:
    """
    Send one notification to the payer or the receiver of a payment.

    Each side receives the other's name and email so they can coordinate.

    Args:
        payment_id: Payment the notification is about
        notification: Key of NOTIFICATIONS
        party: PAYER or RECEIVER
    """
    payment = _get_payment(payment_id)
    if payment is None:
        return False

    if party == PAYER:
        recipient, other_party = payment.payer, payment.receiver
    else:
        recipient, other_party = payment.receiver, payment.payer

    subject, template_name = NOTIFICATIONS[notification]
    service_name = payment.get_request_type_display()

    EmailService.send(
        to=recipient.email,
        subject=subject.format(service_name=service_name),
        template_name=template_name,
        context={
            "recipient_name": recipient.get_full_name(),
            "other_party_name": other_party.get_full_name(),
            "other_party_email": other_party.email,
            "service_name": service_name,
            "amount_display": f"{payment.amount_cents / 100:.2f} {payment.currency.upper()}",
            "is_payer": party == PAYER,
            "payment": payment,
        },
    )
    logger.info(
        "Notification email sent",
        extra={"payment_id": payment_id, "notification": notification, "party": party},
    )
    return True


@shared_task(
    bind=True,
    autoretry_for=(Exception,),
    retry_backoff=True,
    retry_kwargs={"max_retries": 3},
)
def send_match_confirmation_email(self, payment_id: str) -> bool:
    """Tell the traveler and the helper that the match is confirmed."""
    return _notify_both_parties(payment_id, "match_confirmation")


@shared_task(
    bind=True,
    autoretry_for=(Exception,),
    retry_backoff=True,
    retry_kwargs={"max_retries": 3},
)
def send_service_completion_email(self, payment_id: str) -> bool:
    """Tell both parties that the service is complete and funds released."""
    return _notify_both_parties(payment_id, "service_completion")
