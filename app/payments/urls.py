"""
URL configuration for the payments app.

Routes:
    - GET  /history/                   - Payment history
    - GET  /disputes/                  - List disputes
    - POST /disputes/                  - Raise a dispute
    - POST /disputes/{id}/resolve/     - Resolve a dispute (staff)

All routes are prefixed with /api/payments/ when included in the main URLconf.
"""

from django.urls import path

from payments.views import (
    DisputeListCreateView,
    DisputeResolveView,
    PaymentHistoryView,
)

app_name = "payments"

urlpatterns = [
    path("history/", PaymentHistoryView.as_view(), name="history"),
    path("disputes/", DisputeListCreateView.as_view(), name="dispute-list"),
    path(
        "disputes/<uuid:pk>/resolve/",
        DisputeResolveView.as_view(),
        name="dispute-resolve",
    ),
]
