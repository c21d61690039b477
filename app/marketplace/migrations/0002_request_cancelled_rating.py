import uuid

import django.core.validators
import django.db.models.deletion
import django_fsm
from django.conf import settings
from django.db import migrations, models


def _state_field():
    return django_fsm.FSMField(
        choices=[
            ("open", "Open"),
            ("matched", "Matched"),
            ("completed", "Completed"),
            ("cancelled", "Cancelled"),
        ],
        db_index=True,
        default="open",
        help_text="Current state of the request (managed by FSM)",
        max_length=50,
        protected=True,
    )


class Migration(migrations.Migration):

    dependencies = [
        ("marketplace", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.AlterField(
            model_name="flightcompanionrequest",
            name="state",
            field=_state_field(),
        ),
        migrations.AlterField(
            model_name="pickuprequest",
            name="state",
            field=_state_field(),
        ),
        migrations.AddField(
            model_name="flightcompanionrequest",
            name="cancelled_at",
            field=models.DateTimeField(blank=True, null=True),
        ),
        migrations.AddField(
            model_name="pickuprequest",
            name="cancelled_at",
            field=models.DateTimeField(blank=True, null=True),
        ),
        migrations.CreateModel(
            name="Rating",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier (UUID4)",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "request_type",
                    models.CharField(
                        choices=[
                            ("flight_companion", "Flight Companion"),
                            ("pickup", "Airport Pickup"),
                        ],
                        max_length=32,
                    ),
                ),
                ("request_id", models.UUIDField(db_index=True)),
                (
                    "score",
                    models.PositiveSmallIntegerField(
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(5),
                        ]
                    ),
                ),
                ("comment", models.CharField(blank=True, default="", max_length=500)),
                (
                    "is_public",
                    models.BooleanField(
                        default=True,
                        help_text="Private ratings are visible to the two parties only",
                    ),
                ),
                (
                    "rated_user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="ratings_received",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "rater",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="ratings_given",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Rating",
                "verbose_name_plural": "Ratings",
                "ordering": ["-created_at"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("rater", "request_type", "request_id"),
                        name="unique_rating_per_rater_request",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("score__gte", 1), ("score__lte", 5)),
                        name="rating_score_in_range",
                    ),
                ],
            },
        ),
    ]
