"""
State machine enums for payment models.
"""

from payments.state_machines.states import (
    DisputeResolution,
    DisputeStatus,
    EscrowStatus,
    PaymentStatus,
    RequestType,
)

__all__ = [
    "DisputeResolution",
    "DisputeStatus",
    "EscrowStatus",
    "PaymentStatus",
    "RequestType",
]
