"""
API tests for payments endpoints.

Covers payment history, dispute creation/listing and admin resolution,
including the error bodies rendered by core.exception_handler.
"""

import uuid

import pytest
from django.urls import reverse
from rest_framework import status

from payments.models import Dispute
from payments.state_machines import DisputeStatus, EscrowStatus
from payments.tests.factories import EscrowFactory


HISTORY_URL = "/api/payments/history/"
DISPUTES_URL = "/api/payments/disputes/"


class TestPaymentHistoryView:
    """Tests for GET /api/payments/history/."""

    def test_requires_authentication(self, api_client):
        response = api_client.get(HISTORY_URL)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_lists_payments_made_and_received(
        self, db, authenticated_client_factory, traveler, helper, held_payment
    ):
        """Should show the payment to both parties."""
        EscrowFactory()  # someone else's payment

        for user in (traveler, helper):
            response = authenticated_client_factory(user).get(HISTORY_URL)

            assert response.status_code == status.HTTP_200_OK
            results = response.data["results"]
            assert [r["id"] for r in results] == [str(held_payment.id)]

    def test_payment_body(
        self, db, authenticated_client_factory, traveler, held_payment
    ):
        """Should include parties, display amount and nested escrow."""
        response = authenticated_client_factory(traveler).get(HISTORY_URL)

        body = response.data["results"][0]
        assert body["amount_cents"] == 5000
        assert body["amount_display"] == "50.00 NZD"
        assert body["status"] == "held_in_escrow"
        assert body["payer"]["full_name"] == "Alex Traveler"
        assert body["receiver"]["full_name"] == "Sam Helper"
        assert body["escrow"]["status"] == EscrowStatus.HELD


class TestDisputeListCreateView:
    """Tests for GET/POST /api/payments/disputes/."""

    def test_create_dispute(
        self, db, authenticated_client_factory, traveler, held_payment
    ):
        """Should open a dispute and return 201."""
        response = authenticated_client_factory(traveler).post(
            DISPUTES_URL,
            {"payment_id": str(held_payment.id), "reason": "Helper was a no-show"},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["status"] == DisputeStatus.OPEN
        assert response.data["payment_id"] == str(held_payment.id)
        assert Dispute.objects.filter(payment=held_payment).count() == 1

    def test_create_missing_reason(
        self, db, authenticated_client_factory, traveler, held_payment
    ):
        response = authenticated_client_factory(traveler).post(
            DISPUTES_URL, {"payment_id": str(held_payment.id)}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_create_unknown_payment(self, db, authenticated_client_factory, traveler):
        response = authenticated_client_factory(traveler).post(
            DISPUTES_URL,
            {"payment_id": str(uuid.uuid4()), "reason": "No-show"},
            format="json",
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["error_code"] == "PAYMENT_NOT_FOUND"

    def test_create_by_outsider(
        self, db, authenticated_client_factory, outsider, held_payment
    ):
        response = authenticated_client_factory(outsider).post(
            DISPUTES_URL,
            {"payment_id": str(held_payment.id), "reason": "No-show"},
            format="json",
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_create_duplicate_conflicts(
        self, db, authenticated_client_factory, helper, open_dispute
    ):
        response = authenticated_client_factory(helper).post(
            DISPUTES_URL,
            {"payment_id": str(open_dispute.payment_id), "reason": "Me too"},
            format="json",
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["error_code"] == "DISPUTE_OPEN"

    def test_list_own_disputes(
        self, db, authenticated_client_factory, traveler, helper, open_dispute
    ):
        """Should list only the disputes the user raised."""
        response = authenticated_client_factory(traveler).get(DISPUTES_URL)
        assert [d["id"] for d in response.data["results"]] == [str(open_dispute.id)]

        response = authenticated_client_factory(helper).get(DISPUTES_URL)
        assert response.data["results"] == []


class TestDisputeResolveView:
    """Tests for POST /api/payments/disputes/{id}/resolve/."""

    @pytest.fixture(autouse=True)
    def _mock_stripe(self, mocker):
        mocker.patch(
            "payments.services.escrow_service.StripeAdapter.cancel_payment_intent"
        )
        mocker.patch(
            "payments.services.escrow_service.StripeAdapter.capture_payment_intent"
        )

    def _url(self, dispute):
        return reverse("payments:dispute-resolve", kwargs={"pk": dispute.id})

    def test_admin_refunds(
        self, db, authenticated_client_factory, admin_user, open_dispute
    ):
        response = authenticated_client_factory(admin_user).post(
            self._url(open_dispute),
            {"resolution": "refund", "notes": "Confirmed no-show"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["status"] == DisputeStatus.RESOLVED_REFUNDED
        assert response.data["admin_notes"] == "Confirmed no-show"

    def test_non_staff_forbidden(
        self, db, authenticated_client_factory, traveler, open_dispute
    ):
        response = authenticated_client_factory(traveler).post(
            self._url(open_dispute), {"resolution": "refund"}, format="json"
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert Dispute.objects.get(id=open_dispute.id).status == DisputeStatus.OPEN

    def test_invalid_resolution(
        self, db, authenticated_client_factory, admin_user, open_dispute
    ):
        response = authenticated_client_factory(admin_user).post(
            self._url(open_dispute), {"resolution": "split"}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_already_resolved_conflicts(
        self, db, authenticated_client_factory, admin_user, open_dispute
    ):
        client = authenticated_client_factory(admin_user)
        client.post(self._url(open_dispute), {"resolution": "reject"}, format="json")

        response = client.post(
            self._url(open_dispute), {"resolution": "release"}, format="json"
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["error_code"] == "INVALID_STATE"
