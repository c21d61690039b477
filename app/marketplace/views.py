"""
DRF views for marketplace app.

Both marketplaces expose the same endpoints; each view here is a base
class configured per marketplace (``kind`` plus serializers) by the small
subclasses at the bottom of the module.

Endpoints (prefix /api/flightcompanion/ or /api/pickup/):
    GET    requests/                 - Open requests (?mine=true for your own)
    POST   requests/                 - Post a request
    GET    requests/{id}/            - Request detail
    PATCH  requests/{id}/            - Edit an open request (owner)
    DELETE requests/{id}/            - Withdraw an open request (owner)
    GET    offers/                   - Available offers
    POST   offers/                   - Post an offer
    GET    search-requests/          - Search open requests
    GET    match/{request_id}        - Candidate offers, cheapest first
    PUT    match                     - Confirm a match (holds payment in escrow)
    POST   complete-service          - Release escrow to the helper
    GET    requests/airport/{code}/  - Open requests at an airport (pickup only)

Ratings (prefix /api/ratings/):
    POST   /                                    - Rate the other party of a completed service
    GET    {id}/                                - Rating detail
    PATCH  {id}/                                - Edit your rating shortly after submitting
    GET    user/{user_id}/                      - Ratings a user received, with average
    GET    service/{request_type}/{request_id}/ - Ratings of one service

Errors raised by the services (NotFound, Conflict, PermissionDenied,
ValidationError, StripeError) are rendered by core.exception_handler.
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exceptions import NotFoundError
from payments.state_machines import RequestType

from marketplace.serializers import (
    CompleteServiceSerializer,
    FlightCompanionOfferSerializer,
    FlightCompanionRequestSerializer,
    FlightCompanionSearchSerializer,
    MatchConfirmSerializer,
    MatchResultSerializer,
    PickupOfferSerializer,
    PickupRequestSerializer,
    PickupSearchSerializer,
    RatingCreateSerializer,
    RatingSerializer,
    RatingUpdateSerializer,
    UserRatingSummarySerializer,
)
from marketplace.services import (
    MarketplaceService,
    MatchConfirmationService,
    MatchingService,
    RatingService,
    ServiceCompletionService,
)
from marketplace.services.kinds import MARKETPLACES
from payments.serializers import PaymentSerializer

logger = logging.getLogger(__name__)


class MarketplaceViewMixin:
    """Per-marketplace configuration shared by every view below."""

    permission_classes = [IsAuthenticated]
    kind: str = ""
    request_serializer_class = None
    offer_serializer_class = None

    @property
    def market(self):
        return MARKETPLACES[self.kind]


# =============================================================================
# Requests
# =============================================================================


class RequestListCreateView(MarketplaceViewMixin, generics.GenericAPIView):
    """
    List or post requests.

    GET  requests/          Open, active requests, soonest first.
    GET  requests/?mine=true  Every request you posted.
    POST requests/          Post a request; validated against the airport
                            whitelist, amount limit and a future date.
    """

    def get_serializer_class(self):
        return self.request_serializer_class

    def get_queryset(self):
        if self.request.query_params.get("mine") in ("1", "true", "True"):
            return MarketplaceService.requests_for_user(self.kind, self.request.user)
        return MarketplaceService.active_requests(self.kind)

    @extend_schema(
        summary="List requests",
        parameters=[
            OpenApiParameter("mine", bool, description="Only your own requests"),
        ],
    )
    def get(self, request):
        page = self.paginate_queryset(self.get_queryset())
        serializer = self.get_serializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    @extend_schema(
        summary="Post a request",
        responses={
            201: OpenApiResponse(description="Request created"),
            400: OpenApiResponse(description="Invalid input"),
        },
    )
    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        instance = MarketplaceService.create_request(
            self.kind, request.user, serializer.validated_data
        )
        return Response(
            self.get_serializer(instance).data, status=status.HTTP_201_CREATED
        )


class RequestDetailView(MarketplaceViewMixin, generics.GenericAPIView):
    """
    Retrieve, edit or withdraw a request.

    PATCH and DELETE are limited to the owner and only while the request
    is still open; a matched request answers 409.
    """

    def get_serializer_class(self):
        return self.request_serializer_class

    def get_object(self):
        instance = (
            self.market.request_model.objects.select_related("user")
            .filter(id=self.kwargs["pk"])
            .first()
        )
        if instance is None:
            raise NotFoundError(
                "Request not found",
                error_code="REQUEST_NOT_FOUND",
                details={"request_id": str(self.kwargs["pk"])},
            )
        return instance

    @extend_schema(summary="Request detail")
    def get(self, request, pk):
        return Response(self.get_serializer(self.get_object()).data)

    @extend_schema(
        summary="Edit a request",
        responses={
            200: OpenApiResponse(description="Request updated"),
            403: OpenApiResponse(description="Not the owner"),
            409: OpenApiResponse(description="Request already matched"),
        },
    )
    def patch(self, request, pk):
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        updated = MarketplaceService.update_request(
            instance, request.user, serializer.validated_data
        )
        return Response(self.get_serializer(updated).data)

    @extend_schema(
        summary="Withdraw a request",
        responses={
            204: None,
            403: OpenApiResponse(description="Not the owner"),
            409: OpenApiResponse(description="Request already matched"),
        },
    )
    def delete(self, request, pk):
        MarketplaceService.deactivate_request(self.get_object(), request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class SearchRequestsView(MarketplaceViewMixin, generics.GenericAPIView):
    """Search open requests by query parameters."""

    search_serializer_class = None

    def get_serializer_class(self):
        return self.request_serializer_class

    def search(self, params):
        raise NotImplementedError

    def get(self, request):
        params = self.search_serializer_class(data=request.query_params)
        params.is_valid(raise_exception=True)

        page = self.paginate_queryset(self.search(params.validated_data))
        serializer = self.get_serializer(page, many=True)
        return self.get_paginated_response(serializer.data)


# =============================================================================
# Offers
# =============================================================================


class OfferListCreateView(MarketplaceViewMixin, generics.GenericAPIView):
    """
    List or post offers.

    GET  offers/   Offers still available, newest first.
    POST offers/   Post an offer.
    """

    def get_serializer_class(self):
        return self.offer_serializer_class

    @extend_schema(summary="List available offers")
    def get(self, request):
        page = self.paginate_queryset(MarketplaceService.available_offers(self.kind))
        serializer = self.get_serializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    @extend_schema(
        summary="Post an offer",
        responses={
            201: OpenApiResponse(description="Offer created"),
            400: OpenApiResponse(description="Invalid input"),
        },
    )
    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        offer = MarketplaceService.create_offer(
            self.kind, request.user, serializer.validated_data
        )
        return Response(self.get_serializer(offer).data, status=status.HTTP_201_CREATED)


# =============================================================================
# Matching
# =============================================================================


class MatchCandidatesView(MarketplaceViewMixin, generics.GenericAPIView):
    """
    Candidate offers for a request.

    GET match/{request_id}

    Available offers that fit the request, cheapest first. A request that
    is already matched returns an empty list.
    """

    pagination_class = None

    def get_serializer_class(self):
        return self.offer_serializer_class

    def find_matches(self, request_id):
        raise NotImplementedError

    @extend_schema(
        summary="Find matching offers",
        responses={404: OpenApiResponse(description="Request not found")},
    )
    def get(self, request, request_id):
        offers = self.find_matches(request_id)
        return Response(self.get_serializer(offers, many=True).data)


class MatchConfirmView(MarketplaceViewMixin, generics.GenericAPIView):
    """
    Confirm a match.

    PUT match
    Body: {"request_id": "...", "offer_id": "..."}
          (RequestId / OfferId are accepted too)

    Atomically marks the request matched and the offer unavailable,
    creates the payment and holds the funds in escrow. If the hold fails
    nothing is saved.
    """

    serializer_class = MatchConfirmSerializer

    def confirm(self, request_id, offer_id, actor):
        raise NotImplementedError

    @extend_schema(
        summary="Confirm a match",
        request=MatchConfirmSerializer,
        responses={
            200: MatchResultSerializer,
            400: OpenApiResponse(description="Invalid input"),
            403: OpenApiResponse(description="Not the request owner"),
            404: OpenApiResponse(description="Request or offer not found"),
            409: OpenApiResponse(description="Already matched or offer unavailable"),
            402: OpenApiResponse(description="Card declined"),
        },
    )
    def put(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = self.confirm(
            serializer.validated_data["request_id"],
            serializer.validated_data["offer_id"],
            request.user,
        )

        logger.info(
            "Match confirmed via API",
            extra={
                "request_type": self.kind,
                "request_id": str(result.request.id),
                "payment_id": str(result.payment.id),
                "user_id": request.user.id,
            },
        )
        return Response(
            MatchResultSerializer(
                result,
                context={
                    "request_serializer_class": self.request_serializer_class,
                    "offer_serializer_class": self.offer_serializer_class,
                },
            ).data
        )


class CompleteServiceView(MarketplaceViewMixin, generics.GenericAPIView):
    """
    Mark a matched service as delivered.

    POST complete-service
    Body: {"request_id": "..."}

    Releases the escrowed payment to the helper. Only the traveler who
    paid (or staff) may call it; an open dispute blocks it.
    """

    serializer_class = CompleteServiceSerializer

    @extend_schema(
        summary="Complete a service",
        request=CompleteServiceSerializer,
        responses={
            200: PaymentSerializer,
            403: OpenApiResponse(description="Not the paying traveler"),
            404: OpenApiResponse(description="No escrowed payment for this request"),
            409: OpenApiResponse(description="Escrow not held or dispute open"),
        },
    )
    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payment = ServiceCompletionService.complete_service(
            serializer.validated_data["request_id"],
            self.kind,
            actor=request.user,
        )
        return Response(PaymentSerializer(payment).data)


# =============================================================================
# Flight companion
# =============================================================================


class FlightCompanionMixin:
    kind = RequestType.FLIGHT_COMPANION
    request_serializer_class = FlightCompanionRequestSerializer
    offer_serializer_class = FlightCompanionOfferSerializer


@extend_schema(tags=["Flight Companion"])
class FlightCompanionRequestListCreateView(FlightCompanionMixin, RequestListCreateView):
    pass


@extend_schema(tags=["Flight Companion"])
class FlightCompanionRequestDetailView(FlightCompanionMixin, RequestDetailView):
    pass


@extend_schema(tags=["Flight Companion"])
class FlightCompanionOfferListCreateView(FlightCompanionMixin, OfferListCreateView):
    pass


@extend_schema(
    tags=["Flight Companion"],
    summary="Search flight companion requests",
    parameters=[FlightCompanionSearchSerializer],
)
class FlightCompanionSearchView(FlightCompanionMixin, SearchRequestsView):
    search_serializer_class = FlightCompanionSearchSerializer

    def search(self, params):
        return MarketplaceService.search_flight_companion_requests(**params)


@extend_schema(tags=["Flight Companion"])
class FlightCompanionMatchCandidatesView(FlightCompanionMixin, MatchCandidatesView):
    def find_matches(self, request_id):
        return MatchingService.find_flight_companion_matches(request_id)


@extend_schema(tags=["Flight Companion"])
class FlightCompanionMatchConfirmView(FlightCompanionMixin, MatchConfirmView):
    def confirm(self, request_id, offer_id, actor):
        return MatchConfirmationService.confirm_flight_companion_match(
            request_id, offer_id, actor=actor
        )


@extend_schema(tags=["Flight Companion"])
class FlightCompanionCompleteServiceView(FlightCompanionMixin, CompleteServiceView):
    pass


# =============================================================================
# Pickup
# =============================================================================


class PickupMixin:
    kind = RequestType.PICKUP
    request_serializer_class = PickupRequestSerializer
    offer_serializer_class = PickupOfferSerializer


@extend_schema(tags=["Airport Pickup"])
class PickupRequestListCreateView(PickupMixin, RequestListCreateView):
    pass


@extend_schema(tags=["Airport Pickup"])
class PickupRequestDetailView(PickupMixin, RequestDetailView):
    pass


@extend_schema(tags=["Airport Pickup"])
class PickupOfferListCreateView(PickupMixin, OfferListCreateView):
    pass


@extend_schema(
    tags=["Airport Pickup"],
    summary="Search pickup requests",
    parameters=[PickupSearchSerializer],
)
class PickupSearchView(PickupMixin, SearchRequestsView):
    search_serializer_class = PickupSearchSerializer

    def search(self, params):
        return MarketplaceService.search_pickup_requests(**params)


@extend_schema(tags=["Airport Pickup"], summary="Open pickup requests at an airport")
class PickupAirportRequestsView(
    PickupMixin, MarketplaceViewMixin, generics.GenericAPIView
):
    """GET requests/airport/{airport}/ - open requests, by arrival date."""

    def get_serializer_class(self):
        return self.request_serializer_class

    def get(self, request, airport):
        page = self.paginate_queryset(
            MarketplaceService.pickup_requests_by_airport(airport)
        )
        serializer = self.get_serializer(page, many=True)
        return self.get_paginated_response(serializer.data)


@extend_schema(tags=["Airport Pickup"])
class PickupMatchCandidatesView(PickupMixin, MatchCandidatesView):
    def find_matches(self, request_id):
        return MatchingService.find_pickup_matches(request_id)


@extend_schema(tags=["Airport Pickup"])
class PickupMatchConfirmView(PickupMixin, MatchConfirmView):
    def confirm(self, request_id, offer_id, actor):
        return MatchConfirmationService.confirm_pickup_match(
            request_id, offer_id, actor=actor
        )


@extend_schema(tags=["Airport Pickup"])
class PickupCompleteServiceView(PickupMixin, CompleteServiceView):
    pass


# =============================================================================
# Ratings
# =============================================================================


class RatingCreateView(APIView):
    """
    Rate the other party of a completed service.

    POST /api/ratings/

    Body: {"request_type": "pickup", "request_id": "...", "score": 5,
           "comment": "...", "is_public": true}
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="create_rating",
        summary="Rate a completed service",
        request=RatingCreateSerializer,
        responses={
            201: RatingSerializer,
            400: OpenApiResponse(description="Invalid input or self-rating"),
            403: OpenApiResponse(description="Not a party to the service"),
            404: OpenApiResponse(description="Request not found"),
            409: OpenApiResponse(description="Not completed, or already rated"),
        },
        tags=["Ratings"],
    )
    def post(self, request):
        serializer = RatingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        rating = RatingService.submit_rating(
            request_type=data["request_type"],
            request_id=data["request_id"],
            rater=request.user,
            score=data["score"],
            comment=data["comment"],
            is_public=data["is_public"],
        )
        return Response(RatingSerializer(rating).data, status=status.HTTP_201_CREATED)


class RatingDetailView(APIView):
    """
    GET   /api/ratings/{id}/  Private ratings are visible to the two parties only.
    PATCH /api/ratings/{id}/  The rater may edit within the edit window.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="retrieve_rating",
        summary="Rating detail",
        responses={200: RatingSerializer},
        tags=["Ratings"],
    )
    def get(self, request, pk):
        rating = RatingService.get_rating(pk, request.user)
        return Response(RatingSerializer(rating).data)

    @extend_schema(
        operation_id="update_rating",
        summary="Edit your rating",
        request=RatingUpdateSerializer,
        responses={
            200: RatingSerializer,
            403: OpenApiResponse(description="Not your rating"),
            409: OpenApiResponse(description="Edit window has passed"),
        },
        tags=["Ratings"],
    )
    def patch(self, request, pk):
        serializer = RatingUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        rating = RatingService.update_rating(pk, request.user, serializer.validated_data)
        return Response(RatingSerializer(rating).data)


class UserRatingsView(generics.GenericAPIView):
    """
    GET /api/ratings/user/{user_id}/

    Ratings the user received, newest first, paginated, with the average
    score and total count over all of them.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = RatingSerializer

    @extend_schema(operation_id="list_user_ratings", summary="Ratings of a user", tags=["Ratings"])
    def get(self, request, user_id):
        page = self.paginate_queryset(RatingService.ratings_for_user(user_id, request.user))
        response = self.get_paginated_response(self.get_serializer(page, many=True).data)
        response.data["summary"] = UserRatingSummarySerializer(
            RatingService.summary_for_user(user_id)
        ).data
        return response


class ServiceRatingsView(APIView):
    """GET /api/ratings/service/{request_type}/{request_id}/"""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="list_service_ratings",
        summary="Ratings of a service",
        responses={200: RatingSerializer(many=True)},
        tags=["Ratings"],
    )
    def get(self, request, request_type, request_id):
        ratings = RatingService.ratings_for_service(request_type, request_id, request.user)
        return Response(RatingSerializer(ratings, many=True).data)
