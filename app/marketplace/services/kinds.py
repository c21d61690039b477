"""Per-marketplace model wiring shared by confirmation and completion."""

from __future__ import annotations

from dataclasses import dataclass

from django.db import models

from payments.state_machines import RequestType

from marketplace.models import (
    FlightCompanionOffer,
    FlightCompanionRequest,
    PickupOffer,
    PickupRequest,
)


@dataclass(frozen=True)
class Marketplace:
    """
    Attributes:
        request_type: Payment discriminator for this marketplace
        request_model/offer_model: Concrete request and offer models
        counter_field: Offer counter bumped when the offer is matched
        label: Human-readable service name used in emails
    """

    request_type: str
    request_model: type[models.Model]
    offer_model: type[models.Model]
    counter_field: str
    label: str


FLIGHT_COMPANION = Marketplace(
    request_type=RequestType.FLIGHT_COMPANION,
    request_model=FlightCompanionRequest,
    offer_model=FlightCompanionOffer,
    counter_field="helped_count",
    label="Flight Companion",
)

PICKUP = Marketplace(
    request_type=RequestType.PICKUP,
    request_model=PickupRequest,
    offer_model=PickupOffer,
    counter_field="total_pickups",
    label="Airport Pickup",
)

MARKETPLACES = {
    RequestType.FLIGHT_COMPANION: FLIGHT_COMPANION,
    RequestType.PICKUP: PICKUP,
}
