"""
Signals sent by the payments app.

escrow_settled:
    Sent when a dispute resolution moves escrowed money, inside the
    resolving transaction. Receivers get:
        payment: The Payment, already RELEASED or REFUNDED
        outcome: EscrowStatus.RELEASED or EscrowStatus.REFUNDED

    The marketplace app listens for it to close the request behind the
    payment (see marketplace/signals.py).

Usage:
    from payments.signals import escrow_settled

    @receiver(escrow_settled)
    def on_escrow_settled(sender, payment, outcome, **kwargs):
        ...
"""

from django.dispatch import Signal

escrow_settled = Signal()
