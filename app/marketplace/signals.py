"""
Signal handlers for the marketplace app.

Related files:
    - payments/signals.py: escrow_settled
    - services/completion.py: settle_request
    - apps.py: Signal import in ready()
"""

import logging

from django.dispatch import receiver

from payments.signals import escrow_settled

from marketplace.services.completion import ServiceCompletionService

logger = logging.getLogger(__name__)


@receiver(escrow_settled)
def close_request_on_escrow_settled(sender, payment, outcome, **kwargs):
    """
    Complete or cancel the request once a dispute resolution moves its escrow.

    Args:
        sender: The service that settled the escrow
        payment: The released or refunded Payment
        outcome: EscrowStatus.RELEASED or EscrowStatus.REFUNDED
        **kwargs: Additional signal arguments
    """
    logger.debug(f"Escrow settled ({outcome}) for payment {payment.id}")
    ServiceCompletionService.settle_request(payment, outcome)
