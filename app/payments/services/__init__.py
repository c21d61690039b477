"""
Payment services for coordinating escrow operations.

This module provides:
- EscrowPaymentService: Holds, releases and refunds escrowed funds
- DisputeService: Opens and resolves payment disputes
- PaymentHistoryService: Payments made or received by a user

Usage:
    from payments.services import EscrowPaymentService

    service = EscrowPaymentService()
    escrow = service.hold_funds(payment.id, payment.amount_cents)
    service.release_funds(escrow.id)
"""

from payments.services.dispute_service import DisputeService
from payments.services.escrow_service import (
    EscrowPaymentService,
    calculate_platform_fee,
)
from payments.services.history_service import PaymentHistoryService

__all__ = [
    "DisputeService",
    "EscrowPaymentService",
    "PaymentHistoryService",
    "calculate_platform_fee",
]
