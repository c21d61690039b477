"""
Ratings between the two parties of a completed service.

Usage:
    from marketplace.services import RatingService
    from payments.state_machines import RequestType

    rating = RatingService.submit_rating(
        RequestType.PICKUP, request_id, traveler, score=5, comment="Right on time"
    )
    RatingService.summary_for_user(helper.id)  # {"average_score": 5.0, "total_ratings": 1}
"""

from __future__ import annotations

import datetime
import uuid
from typing import TYPE_CHECKING, Any

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import Avg, Count, Q
from django.utils import timezone

from core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from core.services import BaseService
from payments.models import Payment

from marketplace.models import Rating
from marketplace.models.rating import MAX_SCORE, MIN_SCORE
from marketplace.services.kinds import MARKETPLACES
from marketplace.state_machines import RequestState

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from authentication.models import User


def rating_edit_window() -> datetime.timedelta:
    return datetime.timedelta(
        hours=getattr(settings, "MARKETPLACE_RATING_EDIT_WINDOW_HOURS", 24)
    )


class RatingService(BaseService):
    """
    Submits, edits and lists ratings.

    Only a completed request can be rated, and only by its traveler or its
    helper. The rated user is always the other party of the payment.
    """

    @classmethod
    def submit_rating(
        cls,
        request_type: str,
        request_id: uuid.UUID | str,
        rater: User,
        score: int,
        comment: str = "",
        is_public: bool = True,
    ) -> Rating:
        """
        Raises:
            ValidationError: Unknown request type, score outside 1-5, or self-rating
            NotFoundError: No such request (REQUEST_NOT_FOUND)
            ConflictError: Request not completed (SERVICE_NOT_COMPLETED) or
                already rated by this user (ALREADY_RATED)
            PermissionDeniedError: rater took no part in the service
        """
        market = cls._get_market(request_type)
        cls._validate_score(score)

        request = market.request_model.objects.filter(id=request_id).first()
        if request is None:
            raise NotFoundError(
                "Request not found",
                error_code="REQUEST_NOT_FOUND",
                details={"request_id": str(request_id)},
            )

        payment = Payment.objects.filter(
            request_type=market.request_type, request_id=request.id
        ).first()
        if request.state != RequestState.COMPLETED or payment is None:
            raise ConflictError(
                "Cannot rate an incomplete service",
                error_code="SERVICE_NOT_COMPLETED",
                details={"request_id": str(request.id), "state": request.state},
            )

        if rater.id not in (payment.payer_id, payment.receiver_id):
            raise PermissionDeniedError(
                "Only the traveler or the helper of this service can rate it"
            )

        rated_user_id = (
            payment.receiver_id if rater.id == payment.payer_id else payment.payer_id
        )
        if rated_user_id == rater.id:
            raise ValidationError(
                "You cannot rate yourself",
                error_code="SELF_RATING",
            )

        if Rating.objects.filter(
            rater=rater, request_type=market.request_type, request_id=request.id
        ).exists():
            raise ConflictError(
                "You have already rated this service",
                error_code="ALREADY_RATED",
            )

        try:
            with transaction.atomic():
                rating = Rating.objects.create(
                    rater=rater,
                    rated_user_id=rated_user_id,
                    request_type=market.request_type,
                    request_id=request.id,
                    score=score,
                    comment=(comment or "").strip(),
                    is_public=is_public,
                )
        except IntegrityError as e:
            raise ConflictError(
                "You have already rated this service",
                error_code="ALREADY_RATED",
            ) from e

        cls.get_logger().info(
            "Rating submitted",
            extra={
                "rating_id": str(rating.id),
                "rater_id": rater.id,
                "rated_user_id": rated_user_id,
                "request_type": market.request_type,
                "request_id": str(request.id),
                "score": score,
            },
        )
        return rating

    @classmethod
    def update_rating(
        cls, rating_id: uuid.UUID | str, rater: User, data: dict[str, Any]
    ) -> Rating:
        """
        Edit score, comment or visibility within the edit window.

        Raises:
            NotFoundError: Unknown rating (RATING_NOT_FOUND)
            PermissionDeniedError: Not the rater
            ConflictError: Edit window has passed (RATING_LOCKED)
            ValidationError: score outside 1-5
        """
        with cls.atomic():
            rating = Rating.objects.select_for_update().filter(id=rating_id).first()
            if rating is None:
                raise NotFoundError(
                    "Rating not found",
                    error_code="RATING_NOT_FOUND",
                    details={"rating_id": str(rating_id)},
                )

            if rating.rater_id != rater.id:
                raise PermissionDeniedError("You can only update your own ratings")

            if timezone.now() - rating.created_at > rating_edit_window():
                raise ConflictError(
                    "Ratings can only be updated shortly after they are submitted",
                    error_code="RATING_LOCKED",
                    details={"created_at": rating.created_at.isoformat()},
                )

            if "score" in data:
                cls._validate_score(data["score"])
                rating.score = data["score"]
            if "comment" in data:
                rating.comment = (data["comment"] or "").strip()
            if "is_public" in data:
                rating.is_public = data["is_public"]
            rating.save()

        cls.get_logger().info(
            "Rating updated",
            extra={"rating_id": str(rating.id), "rater_id": rater.id},
        )
        return rating

    @classmethod
    def get_rating(cls, rating_id: uuid.UUID | str, viewer: User) -> Rating:
        rating = (
            Rating.objects.select_related("rater", "rated_user")
            .filter(id=rating_id)
            .first()
        )
        if rating is None:
            raise NotFoundError(
                "Rating not found",
                error_code="RATING_NOT_FOUND",
                details={"rating_id": str(rating_id)},
            )
        if not rating.is_public and viewer.id not in (rating.rater_id, rating.rated_user_id):
            raise PermissionDeniedError("You don't have permission to view this rating")
        return rating

    @classmethod
    def ratings_for_user(cls, user_id: int, viewer: User) -> QuerySet[Rating]:
        """
        Ratings a user received; private ones only when they look at their own.

        Raises:
            NotFoundError: No active user with this id (USER_NOT_FOUND)
        """
        if not get_user_model().objects.filter(id=user_id, is_active=True).exists():
            raise NotFoundError(
                "User not found",
                error_code="USER_NOT_FOUND",
                details={"user_id": user_id},
            )

        queryset = Rating.objects.select_related("rater", "rated_user").filter(
            rated_user_id=user_id
        )
        if viewer.id != user_id:
            queryset = queryset.filter(is_public=True)
        return queryset

    @classmethod
    def ratings_for_service(
        cls, request_type: str, request_id: uuid.UUID | str, viewer: User
    ) -> QuerySet[Rating]:
        """Public ratings of one request, plus private ones the viewer is part of."""
        market = cls._get_market(request_type)
        return Rating.objects.select_related("rater", "rated_user").filter(
            Q(is_public=True) | Q(rater=viewer) | Q(rated_user=viewer),
            request_type=market.request_type,
            request_id=request_id,
        )

    @classmethod
    def summary_for_user(cls, user_id: int) -> dict[str, Any]:
        """Average score and count over every rating the user received."""
        stats = Rating.objects.filter(rated_user_id=user_id).aggregate(
            average_score=Avg("score"), total_ratings=Count("id")
        )
        average = stats["average_score"]
        return {
            "average_score": round(float(average), 2) if average is not None else None,
            "total_ratings": stats["total_ratings"],
        }

    @staticmethod
    def _get_market(request_type: str):
        market = MARKETPLACES.get(request_type)
        if market is None:
            raise ValidationError(
                "Invalid request type",
                details={"request_type": [f"Must be one of: {', '.join(MARKETPLACES)}"]},
            )
        return market

    @staticmethod
    def _validate_score(score) -> None:
        if isinstance(score, bool) or not isinstance(score, int) or not (
            MIN_SCORE <= score <= MAX_SCORE
        ):
            raise ValidationError(
                "Invalid score",
                details={"score": [f"Score must be between {MIN_SCORE} and {MAX_SCORE}."]},
            )
