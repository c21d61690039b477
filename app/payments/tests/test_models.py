"""
Tests for payment models.

Covers field defaults, constraints, version counting and string
representations for Payment, Escrow and Dispute.
"""

import uuid

import pytest
from django.db import IntegrityError, transaction

from payments.models import Dispute, Escrow, Payment
from payments.state_machines import (
    DisputeStatus,
    EscrowStatus,
    PaymentStatus,
    RequestType,
)
from payments.tests.factories import DisputeFactory, PaymentFactory


# =============================================================================
# Payment Model Tests
# =============================================================================


class TestPaymentModel:
    """Tests for Payment model."""

    def test_create_with_required_fields(self, db, traveler, helper):
        """Should create payment with required fields only."""
        request_id = uuid.uuid4()
        payment = Payment.objects.create(
            payer=traveler,
            receiver=helper,
            request_type=RequestType.PICKUP,
            request_id=request_id,
            amount_cents=3000,
        )

        assert payment.id is not None
        assert payment.request_id == request_id
        assert payment.amount_cents == 3000

    def test_default_values(self, db, created_payment):
        """Should apply defaults to a fresh payment."""
        assert created_payment.status == PaymentStatus.CREATED
        assert created_payment.platform_fee_cents == 0
        assert created_payment.stripe_payment_intent_id is None
        assert created_payment.completed_at is None
        assert created_payment.version == 1

    def test_default_currency_from_settings(self, db, traveler, helper, settings):
        """Should take the currency from PAYMENT_DEFAULT_CURRENCY."""
        settings.PAYMENT_DEFAULT_CURRENCY = "aud"

        payment = Payment.objects.create(
            payer=traveler,
            receiver=helper,
            request_type=RequestType.PICKUP,
            request_id=uuid.uuid4(),
            amount_cents=3000,
        )

        assert payment.currency == "aud"

    def test_one_payment_per_request(self, db, created_payment):
        """Should reject a second payment for the same request."""
        with pytest.raises(IntegrityError), transaction.atomic():
            PaymentFactory(
                request_type=created_payment.request_type,
                request_id=created_payment.request_id,
            )

    def test_same_request_id_different_type_allowed(self, db, created_payment):
        """Should scope uniqueness to the request type."""
        other = PaymentFactory(
            request_type=RequestType.PICKUP,
            request_id=created_payment.request_id,
        )

        assert other.id != created_payment.id

    def test_stripe_payment_intent_id_unique(self, db):
        """Should enforce unique PaymentIntent ids."""
        PaymentFactory(stripe_payment_intent_id="pi_duplicate")

        with pytest.raises(IntegrityError), transaction.atomic():
            PaymentFactory(stripe_payment_intent_id="pi_duplicate")

    def test_version_increments_on_save(self, db, created_payment):
        """Should bump version on every update."""
        created_payment.completed_at = None
        created_payment.save()
        assert created_payment.version == 2

        created_payment.save()
        assert created_payment.version == 3

    def test_str_representation(self, db, created_payment):
        """Should include status and formatted amount."""
        assert "created" in str(created_payment)
        assert "50.00 NZD" in str(created_payment)


# =============================================================================
# Escrow Model Tests
# =============================================================================


class TestEscrowModel:
    """Tests for Escrow model."""

    def test_defaults(self, db, created_payment):
        """Should start in HELD."""
        escrow = Escrow.objects.create(payment=created_payment, amount_cents=5000)

        assert escrow.status == EscrowStatus.HELD
        assert escrow.currency == "nzd"
        assert escrow.released_at is None

    def test_one_escrow_per_payment(self, db, held_escrow):
        """Should reject a second escrow for the same payment."""
        with pytest.raises(IntegrityError), transaction.atomic():
            Escrow.objects.create(payment=held_escrow.payment, amount_cents=5000)

    def test_reverse_accessor(self, db, held_escrow):
        """Should be reachable from the payment."""
        payment = Payment.objects.get(id=held_escrow.payment_id)

        assert payment.escrow == held_escrow

    def test_str_representation(self, db, held_escrow):
        assert str(held_escrow) == f"Escrow({held_escrow.id}, 50.00 NZD, held)"


# =============================================================================
# Dispute Model Tests
# =============================================================================


class TestDisputeModel:
    """Tests for Dispute model."""

    def test_defaults(self, db, open_dispute):
        """Should start open with no resolution."""
        assert open_dispute.status == DisputeStatus.OPEN
        assert open_dispute.is_open is True
        assert open_dispute.resolved_by is None
        assert open_dispute.evidence_url == ""

    def test_one_open_dispute_per_payment(self, db, open_dispute, helper):
        """Should reject a second open dispute on the same payment."""
        with pytest.raises(IntegrityError), transaction.atomic():
            Dispute.objects.create(
                payment=open_dispute.payment,
                raised_by=helper,
                reason="Second complaint",
            )

    def test_closed_dispute_allows_new_one(self, db, held_payment, traveler, helper):
        """Should allow a new dispute once the previous one is closed."""
        DisputeFactory(
            payment=held_payment,
            raised_by=traveler,
            status=DisputeStatus.REJECTED,
        )

        dispute = Dispute.objects.create(
            payment=held_payment,
            raised_by=helper,
            reason="Traveler cancelled at the gate",
        )

        assert dispute.is_open
