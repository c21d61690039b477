"""
Business-rule validation for marketplace requests and offers.

Each function raises core.exceptions.ValidationError (HTTP 400) with the
offending field in details, so both the service layer and the API report
the same error body.

Usage:
    from marketplace.validators import validate_airport, validate_future_date

    airport = validate_airport(data["departure_airport"], "departure_airport")
"""

from __future__ import annotations

import datetime

from django.conf import settings
from django.utils import timezone

from core.exceptions import ValidationError

DEFAULT_SUPPORTED_AIRPORTS = ["AKL", "PVG", "SHA", "PEK", "CAN", "SZX", "WLG", "CHC", "SYD"]


def supported_airports() -> set[str]:
    codes = getattr(settings, "MARKETPLACE_SUPPORTED_AIRPORTS", DEFAULT_SUPPORTED_AIRPORTS)
    return {code.strip().upper() for code in codes}


def validate_airport(code: str, field: str = "airport") -> str:
    """Return the upper-cased IATA code, or raise if it is not served."""
    normalized = (code or "").strip().upper()
    if normalized not in supported_airports():
        raise ValidationError(
            f"Airport code {normalized or code!r} is not supported",
            details={field: [f"Supported airports: {', '.join(sorted(supported_airports()))}"]},
        )
    return normalized


def validate_future_date(value: datetime.datetime, field: str) -> datetime.datetime:
    if value is None or value <= timezone.now():
        raise ValidationError(
            "Date must be in the future",
            details={field: ["Date must be in the future."]},
        )
    return value


def validate_amount(amount_cents: int, max_cents: int, field: str) -> int:
    """Amounts are integers in cents between 0 and max_cents inclusive."""
    if amount_cents is None or amount_cents < 0:
        raise ValidationError(
            "Amount cannot be negative",
            details={field: ["Amount cannot be negative."]},
        )
    if amount_cents > max_cents:
        raise ValidationError(
            f"Amount cannot exceed {max_cents / 100:.2f}",
            details={field: [f"Maximum is {max_cents} cents."]},
        )
    return amount_cents


def max_flight_companion_amount() -> int:
    return getattr(settings, "MARKETPLACE_MAX_FLIGHT_COMPANION_AMOUNT_CENTS", 50000)


def max_pickup_amount() -> int:
    return getattr(settings, "MARKETPLACE_MAX_PICKUP_AMOUNT_CENTS", 20000)
