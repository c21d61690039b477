"""
Marketplace models.

Usage:
    from marketplace.models import FlightCompanionRequest, PickupOffer
"""

from marketplace.models.base import ServiceOffer, ServiceRequest
from marketplace.models.flight_companion import (
    FlightCompanionOffer,
    FlightCompanionRequest,
)
from marketplace.models.pickup import PickupOffer, PickupRequest
from marketplace.models.rating import Rating

__all__ = [
    "FlightCompanionOffer",
    "FlightCompanionRequest",
    "PickupOffer",
    "PickupRequest",
    "Rating",
    "ServiceOffer",
    "ServiceRequest",
]
