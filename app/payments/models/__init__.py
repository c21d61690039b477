"""
Payment domain models.

This module contains all payment-related models:
- Payment: One payment per confirmed match, tracking the escrow lifecycle
- Escrow: Funds held for a payment until the service is completed
- Dispute: Contested payments awaiting admin resolution
"""

from payments.models.dispute import Dispute
from payments.models.payment import Escrow, Payment

__all__ = [
    "Dispute",
    "Escrow",
    "Payment",
]
