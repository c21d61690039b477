"""Payment history for travelers and helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.db.models import Q

from core.services import BaseService

from payments.models import Payment

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from authentication.models import User


class PaymentHistoryService(BaseService):
    @classmethod
    def for_user(cls, user: User) -> QuerySet[Payment]:
        """Payments the user made or received, newest first."""
        return (
            Payment.objects.filter(Q(payer=user) | Q(receiver=user))
            .select_related("payer", "receiver", "escrow")
            .order_by("-created_at")
        )
