"""
Payment admin configuration.

Payments, escrows and disputes are created and moved through their state
machines by the service layer; the admin is read-mostly.
"""

from django.contrib import admin

from payments.models import Dispute, Escrow, Payment

__all__ = [
    "DisputeAdmin",
    "EscrowAdmin",
    "PaymentAdmin",
]


class EscrowInline(admin.StackedInline):
    """Inline display of the escrow hold for a payment."""

    model = Escrow
    extra = 0
    readonly_fields = [
        "id",
        "amount_cents",
        "currency",
        "status",
        "stripe_payment_intent_id",
        "released_at",
        "refunded_at",
    ]
    can_delete = False

    def has_add_permission(self, request, obj=None) -> bool:
        return False


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """
    Admin configuration for Payment.

    State changes should be made through the service layer, not admin.
    """

    list_display = [
        "id",
        "payer",
        "receiver",
        "amount_display",
        "status",
        "request_type",
        "created_at",
    ]
    list_filter = ["status", "request_type", "currency", "created_at"]
    search_fields = [
        "id",
        "request_id",
        "stripe_payment_intent_id",
        "payer__email",
        "receiver__email",
    ]
    readonly_fields = [
        "id",
        "status",
        "created_at",
        "updated_at",
        "version",
        "held_at",
        "released_at",
        "refunded_at",
        "completed_at",
    ]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]
    inlines = [EscrowInline]

    fieldsets = (
        (None, {"fields": ("id", "payer", "receiver", "status")}),
        ("Amount", {"fields": ("amount_cents", "currency", "platform_fee_cents")}),
        (
            "Match",
            {"fields": ("request_type", "request_id", "stripe_payment_intent_id")},
        ),
        (
            "State Timestamps",
            {
                "fields": ("held_at", "released_at", "refunded_at", "completed_at"),
                "classes": ("collapse",),
            },
        ),
        ("Timestamps", {"fields": ("created_at", "updated_at", "version")}),
    )

    @admin.display(description="Amount")
    def amount_display(self, obj: Payment) -> str:
        return f"{obj.amount_cents / 100:.2f} {obj.currency.upper()}"

    def has_delete_permission(self, request, obj=None) -> bool:
        """Disable delete for payments (audit trail)."""
        return False


@admin.register(Escrow)
class EscrowAdmin(admin.ModelAdmin):
    list_display = ["id", "payment", "amount_cents", "status", "created_at"]
    list_filter = ["status", "created_at"]
    search_fields = ["id", "payment__id", "stripe_payment_intent_id"]
    readonly_fields = [
        "id",
        "payment",
        "amount_cents",
        "currency",
        "status",
        "stripe_payment_intent_id",
        "released_at",
        "refunded_at",
        "version",
        "created_at",
        "updated_at",
    ]
    ordering = ["-created_at"]

    def has_add_permission(self, request) -> bool:
        return False

    def has_delete_permission(self, request, obj=None) -> bool:
        return False


@admin.register(Dispute)
class DisputeAdmin(admin.ModelAdmin):
    """
    Admin configuration for Dispute.

    Resolution goes through the API (POST disputes/{id}/resolve/) so the
    escrow is released or refunded in the same transaction.
    """

    list_display = ["id", "payment", "raised_by", "status", "created_at"]
    list_filter = ["status", "created_at"]
    search_fields = ["id", "payment__id", "raised_by__email", "reason"]
    readonly_fields = [
        "id",
        "payment",
        "raised_by",
        "status",
        "resolved_by",
        "resolved_at",
        "created_at",
        "updated_at",
    ]
    ordering = ["-created_at"]

    def has_delete_permission(self, request, obj=None) -> bool:
        return False
