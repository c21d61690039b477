"""
URL configuration for ratings.

Routes:
    - POST       /                                     - Rate a completed service
    - GET/PATCH  /{id}/                                - Rating detail / edit
    - GET        /user/{user_id}/                      - Ratings a user received
    - GET        /service/{request_type}/{request_id}/ - Ratings of one service

All routes are prefixed with /api/ratings/ when included in the main URLconf.
"""

from django.urls import path

from marketplace.views import (
    RatingCreateView,
    RatingDetailView,
    ServiceRatingsView,
    UserRatingsView,
)

app_name = "ratings"

urlpatterns = [
    path("", RatingCreateView.as_view(), name="rating-create"),
    path("<uuid:pk>/", RatingDetailView.as_view(), name="rating-detail"),
    path("user/<int:user_id>/", UserRatingsView.as_view(), name="user-ratings"),
    path(
        "service/<str:request_type>/<uuid:request_id>/",
        ServiceRatingsView.as_view(),
        name="service-ratings",
    ),
]
