"""Tests for marketplace business-rule validators."""

import datetime

import pytest
from django.utils import timezone
from freezegun import freeze_time

from core.exceptions import ValidationError
from marketplace.validators import (
    max_flight_companion_amount,
    max_pickup_amount,
    validate_airport,
    validate_amount,
    validate_future_date,
)


class TestValidateAirport:
    def test_normalizes_case(self):
        assert validate_airport(" akl ", "departure_airport") == "AKL"

    def test_rejects_unsupported(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_airport("LAX", "arrival_airport")

        assert "arrival_airport" in exc_info.value.details

    @pytest.mark.parametrize("code", ["", None])
    def test_rejects_empty(self, code):
        with pytest.raises(ValidationError):
            validate_airport(code)

    def test_whitelist_from_settings(self, settings):
        settings.MARKETPLACE_SUPPORTED_AIRPORTS = ["lax"]

        assert validate_airport("LAX") == "LAX"
        with pytest.raises(ValidationError):
            validate_airport("AKL")


class TestValidateFutureDate:
    def test_accepts_future(self):
        value = timezone.now() + datetime.timedelta(hours=1)

        assert validate_future_date(value, "flight_date") == value

    def test_rejects_past(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_future_date(
                timezone.now() - datetime.timedelta(minutes=1), "flight_date"
            )

        assert exc_info.value.details == {"flight_date": ["Date must be in the future."]}

    def test_rejects_missing(self):
        with pytest.raises(ValidationError):
            validate_future_date(None, "arrival_date")

    def test_boundary_is_exclusive(self):
        with freeze_time("2026-03-01 09:00:00"):
            now = timezone.now()

            with pytest.raises(ValidationError):
                validate_future_date(now, "flight_date")
            assert validate_future_date(
                now + datetime.timedelta(seconds=1), "flight_date"
            )


class TestValidateAmount:
    @pytest.mark.parametrize("amount", [0, 1, 50000])
    def test_accepts_in_range(self, amount):
        assert validate_amount(amount, 50000, "offered_amount_cents") == amount

    def test_rejects_negative(self):
        with pytest.raises(ValidationError):
            validate_amount(-1, 50000, "offered_amount_cents")

    def test_rejects_above_max(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_amount(50001, 50000, "offered_amount_cents")

        assert "offered_amount_cents" in exc_info.value.details

    def test_limits_from_settings(self, settings):
        settings.MARKETPLACE_MAX_FLIGHT_COMPANION_AMOUNT_CENTS = 100
        settings.MARKETPLACE_MAX_PICKUP_AMOUNT_CENTS = 200

        assert max_flight_companion_amount() == 100
        assert max_pickup_amount() == 200
