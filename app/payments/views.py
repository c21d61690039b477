"""
DRF views for payments app.

This module provides API views for:
- Payment history
- Dispute listing, creation and admin resolution

Related files:
    - services/: PaymentHistoryService, DisputeService
    - serializers.py: Request/response serializers
    - urls.py: URL routing

Endpoints:
    GET  /api/payments/history/                  - Payments made or received
    GET  /api/payments/disputes/                 - List disputes
    POST /api/payments/disputes/                 - Raise a dispute
    POST /api/payments/disputes/{id}/resolve/    - Resolve a dispute (staff)

Errors raised by the services (NotFound, Conflict, PermissionDenied) are
rendered by core.exception_handler.
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from payments.pagination import PaymentCursorPagination
from payments.serializers import (
    DisputeCreateSerializer,
    DisputeResolveSerializer,
    DisputeSerializer,
    PaymentSerializer,
)
from payments.services import DisputeService, PaymentHistoryService

logger = logging.getLogger(__name__)


class PaymentHistoryView(generics.ListAPIView):
    """
    List the current user's payments.

    GET /api/payments/history/

    Returns payments where the user is the payer (traveler) or the
    receiver (helper), newest first.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = PaymentSerializer
    pagination_class = PaymentCursorPagination

    def get_queryset(self):
        return PaymentHistoryService.for_user(self.request.user)

    @extend_schema(
        operation_id="list_payment_history",
        summary="Payment history",
        tags=["Payments"],
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class DisputeListCreateView(APIView):
    """
    List or raise disputes.

    GET  /api/payments/disputes/
        Staff see every dispute, other users the disputes they raised.

    POST /api/payments/disputes/
        Raise a dispute on a payment held in escrow.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="list_disputes",
        summary="List disputes",
        responses={200: DisputeSerializer(many=True)},
        tags=["Payments - Disputes"],
    )
    def get(self, request):
        paginator = PaymentCursorPagination()
        page = paginator.paginate_queryset(
            DisputeService.list_disputes(request.user), request, view=self
        )
        return paginator.get_paginated_response(DisputeSerializer(page, many=True).data)

    @extend_schema(
        operation_id="create_dispute",
        summary="Raise a dispute",
        request=DisputeCreateSerializer,
        responses={
            201: DisputeSerializer,
            400: OpenApiResponse(description="Invalid input"),
            403: OpenApiResponse(description="Not a party to the payment"),
            404: OpenApiResponse(description="Payment not found"),
            409: OpenApiResponse(description="Payment not held or already disputed"),
        },
        tags=["Payments - Disputes"],
    )
    def post(self, request):
        serializer = DisputeCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        dispute = DisputeService.open_dispute(
            payment_id=data["payment_id"],
            user=request.user,
            reason=data["reason"],
            evidence_url=data.get("evidence_url"),
        )
        return Response(DisputeSerializer(dispute).data, status=status.HTTP_201_CREATED)


class DisputeResolveView(APIView):
    """
    Resolve an open dispute.

    POST /api/payments/disputes/{id}/resolve/

    Staff only. Releasing or refunding moves the escrowed funds;
    rejecting closes the dispute and leaves the funds held.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="resolve_dispute",
        summary="Resolve a dispute",
        request=DisputeResolveSerializer,
        responses={
            200: DisputeSerializer,
            403: OpenApiResponse(description="Staff only"),
            404: OpenApiResponse(description="Dispute not found"),
            409: OpenApiResponse(description="Dispute is not open"),
        },
        tags=["Payments - Disputes"],
    )
    def post(self, request, pk):
        serializer = DisputeResolveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        dispute = DisputeService.resolve_dispute(
            dispute_id=pk,
            admin=request.user,
            resolution=serializer.validated_data["resolution"],
            notes=serializer.validated_data["notes"],
        )
        return Response(DisputeSerializer(dispute).data)
