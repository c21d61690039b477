"""
URL configuration for the airport pickup marketplace.

Same routes as flight_companion.py, plus:
    - GET /requests/airport/{airport}/  - Open requests at an airport

All routes are prefixed with /api/pickup/ when included in the main URLconf.
"""

from django.urls import path, re_path

from marketplace.urls.patterns import PATH_ID_PATTERN
from marketplace.views import (
    PickupAirportRequestsView,
    PickupCompleteServiceView,
    PickupMatchCandidatesView,
    PickupMatchConfirmView,
    PickupOfferListCreateView,
    PickupRequestDetailView,
    PickupRequestListCreateView,
    PickupSearchView,
)

app_name = "pickup"

urlpatterns = [
    path("requests/", PickupRequestListCreateView.as_view(), name="request-list"),
    path(
        "requests/airport/<str:airport>/",
        PickupAirportRequestsView.as_view(),
        name="requests-by-airport",
    ),
    path(
        "requests/<uuid:pk>/",
        PickupRequestDetailView.as_view(),
        name="request-detail",
    ),
    path("offers/", PickupOfferListCreateView.as_view(), name="offer-list"),
    path("search-requests/", PickupSearchView.as_view(), name="search-requests"),
    re_path(
        rf"^match/(?P<request_id>{PATH_ID_PATTERN})/?$",
        PickupMatchCandidatesView.as_view(),
        name="match-candidates",
    ),
    re_path(r"^match/?$", PickupMatchConfirmView.as_view(), name="match-confirm"),
    re_path(
        r"^complete-service/?$",
        PickupCompleteServiceView.as_view(),
        name="complete-service",
    ),
]
