"""
DRF serializers for payments app.

This module provides serializers for:
- Payment and escrow display (history, match results)
- Dispute display, creation and resolution

Related files:
    - models/: Payment, Escrow, Dispute
    - views.py: Payment API views
"""

from __future__ import annotations

from rest_framework import serializers

from authentication.serializers import UserSerializer
from payments.models import Dispute, Escrow, Payment
from payments.state_machines import DisputeResolution


class EscrowSerializer(serializers.ModelSerializer):
    """Escrow hold details (read-only)."""

    class Meta:
        model = Escrow
        fields = [
            "id",
            "amount_cents",
            "currency",
            "status",
            "released_at",
            "refunded_at",
            "created_at",
        ]
        read_only_fields = fields


class PaymentSerializer(serializers.ModelSerializer):
    """
    Payment serializer for API responses.

    Fields:
        amount_display: Formatted amount (e.g., "50.00 NZD")
        escrow: Nested escrow hold, or null before the hold
    """

    payer = UserSerializer(read_only=True)
    receiver = UserSerializer(read_only=True)
    amount_display = serializers.SerializerMethodField()
    escrow = serializers.SerializerMethodField()

    class Meta:
        model = Payment
        fields = [
            "id",
            "payer",
            "receiver",
            "request_type",
            "request_id",
            "amount_cents",
            "currency",
            "amount_display",
            "platform_fee_cents",
            "status",
            "escrow",
            "held_at",
            "released_at",
            "refunded_at",
            "completed_at",
            "created_at",
        ]
        read_only_fields = fields

    def get_amount_display(self, obj: Payment) -> str:
        return f"{obj.amount_cents / 100:.2f} {obj.currency.upper()}"

    def get_escrow(self, obj: Payment) -> dict | None:
        escrow = Escrow.objects.filter(payment=obj).first()
        if escrow is None:
            return None
        return EscrowSerializer(escrow).data


class DisputeSerializer(serializers.ModelSerializer):
    """Dispute serializer for API responses."""

    raised_by = UserSerializer(read_only=True)
    resolved_by = UserSerializer(read_only=True, allow_null=True)
    payment_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Dispute
        fields = [
            "id",
            "payment_id",
            "raised_by",
            "reason",
            "evidence_url",
            "status",
            "admin_notes",
            "resolved_by",
            "resolved_at",
            "created_at",
        ]
        read_only_fields = fields


class DisputeCreateSerializer(serializers.Serializer):
    """Serializer for raising a dispute on a held payment."""

    payment_id = serializers.UUIDField(help_text="Payment being disputed")
    reason = serializers.CharField(
        max_length=2000,
        help_text="Why the payment is disputed",
    )
    evidence_url = serializers.URLField(
        required=False,
        allow_blank=True,
        help_text="Optional link to supporting evidence",
    )


class DisputeResolveSerializer(serializers.Serializer):
    """Serializer for an admin resolving a dispute."""

    resolution = serializers.ChoiceField(
        choices=DisputeResolution.choices,
        help_text="release, refund or reject",
    )
    notes = serializers.CharField(required=False, allow_blank=True, default="")
