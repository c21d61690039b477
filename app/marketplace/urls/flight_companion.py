"""
URL configuration for the flight companion marketplace.

Routes:
    - GET/POST          /requests/                 - List/post requests
    - GET/PATCH/DELETE  /requests/{id}/            - Request detail
    - GET/POST          /offers/                   - List/post offers
    - GET               /search-requests/          - Search open requests
    - GET               /match/{request_id}        - Candidate offers
    - PUT               /match                     - Confirm a match
    - POST              /complete-service          - Release escrow

The match and complete-service routes accept an optional trailing slash.
All routes are prefixed with /api/flightcompanion/ when included in the
main URLconf.
"""

from django.urls import path, re_path

from marketplace.urls.patterns import PATH_ID_PATTERN
from marketplace.views import (
    FlightCompanionCompleteServiceView,
    FlightCompanionMatchCandidatesView,
    FlightCompanionMatchConfirmView,
    FlightCompanionOfferListCreateView,
    FlightCompanionRequestDetailView,
    FlightCompanionRequestListCreateView,
    FlightCompanionSearchView,
)

app_name = "flight_companion"

urlpatterns = [
    path(
        "requests/",
        FlightCompanionRequestListCreateView.as_view(),
        name="request-list",
    ),
    path(
        "requests/<uuid:pk>/",
        FlightCompanionRequestDetailView.as_view(),
        name="request-detail",
    ),
    path("offers/", FlightCompanionOfferListCreateView.as_view(), name="offer-list"),
    path(
        "search-requests/",
        FlightCompanionSearchView.as_view(),
        name="search-requests",
    ),
    re_path(
        rf"^match/(?P<request_id>{PATH_ID_PATTERN})/?$",
        FlightCompanionMatchCandidatesView.as_view(),
        name="match-candidates",
    ),
    re_path(
        r"^match/?$",
        FlightCompanionMatchConfirmView.as_view(),
        name="match-confirm",
    ),
    re_path(
        r"^complete-service/?$",
        FlightCompanionCompleteServiceView.as_view(),
        name="complete-service",
    ),
]
