"""
Rating model: one party's review of the other after a completed service.
"""

from __future__ import annotations

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from core.models import BaseModel
from core.model_mixins import UUIDPrimaryKeyMixin
from payments.state_machines import RequestType

MIN_SCORE = 1
MAX_SCORE = 5


class Rating(UUIDPrimaryKeyMixin, BaseModel):
    """
    A 1-5 score left by the traveler or the helper of a completed request.

    Each party rates a given request at most once; the rated user is
    always the other party. request_type/request_id point at the request
    the same way Payment does.
    """

    rater = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="ratings_given",
    )

    rated_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="ratings_received",
    )

    request_type = models.CharField(max_length=32, choices=RequestType.choices)
    request_id = models.UUIDField(db_index=True)

    score = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(MIN_SCORE), MaxValueValidator(MAX_SCORE)],
    )

    comment = models.CharField(max_length=500, blank=True, default="")

    is_public = models.BooleanField(
        default=True,
        help_text="Private ratings are visible to the two parties only",
    )

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Rating"
        verbose_name_plural = "Ratings"
        constraints = [
            models.UniqueConstraint(
                fields=["rater", "request_type", "request_id"],
                name="unique_rating_per_rater_request",
            ),
            models.CheckConstraint(
                condition=models.Q(score__gte=MIN_SCORE, score__lte=MAX_SCORE),
                name="rating_score_in_range",
            ),
        ]

    def __str__(self):
        return f"{self.score}/{MAX_SCORE} for {self.rated_user_id} ({self.request_type})"
