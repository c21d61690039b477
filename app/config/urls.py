"""
URL configuration for the Django application.

The `urlpatterns` list routes URLs to views. This is the root URL configuration
that includes all app-specific routes.

URL Structure:
    /                              - ReDoc API documentation
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint (for load balancers, Docker)
    /schema/                       - OpenAPI schema (YAML)
    /api/flightcompanion/          - Flight companion marketplace
        requests/                  - Request list/create
        requests/{id}/             - Request detail/update/deactivate
        offers/                    - Offer list/create
        search-requests/           - Search open requests
        match/{request_id}         - Candidate offers for a request (GET)
        match                      - Confirm a match (PUT)
        complete-service           - Release escrow after the flight (POST)
    /api/pickup/                   - Airport pickup marketplace (same shape)
        requests/airport/{code}/   - Open requests at an airport
    /api/payments/                 - Payment endpoints
        history/                   - Payments made or received
        disputes/                  - Dispute list/create
        disputes/{id}/resolve/     - Resolve a dispute (staff)
    /api/ratings/                  - Ratings between the parties of a completed service
        user/{user_id}/            - Ratings a user received
        service/{type}/{id}/       - Ratings of one service

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API Routes
# =============================================================================
# All routes here are prefixed with /api/ automatically
api_patterns = [
    path("flightcompanion/", include("marketplace.urls.flight_companion")),
    path("pickup/", include("marketplace.urls.pickup")),
    path("payments/", include("payments.urls")),
    path("ratings/", include("marketplace.urls.ratings")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    path("api/", include(api_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Flight Companion Admin"
admin.site.site_title = "Flight Companion Admin"
admin.site.index_title = "Marketplace and payments"
