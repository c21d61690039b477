"""
Payments app: escrow for marketplace matches.

This app handles:
- Payment and Escrow records created when a match is confirmed
- Holding, releasing and refunding funds through Stripe
- Disputes raised against held payments
- Payment history for travelers and helpers

Related apps:
    - marketplace: Creates payments and triggers release on completion

Usage:
    from payments.services import EscrowPaymentService

    escrow = EscrowPaymentService().hold_funds(payment.id, payment.amount_cents)
    EscrowPaymentService().release_funds(escrow.id)
"""
