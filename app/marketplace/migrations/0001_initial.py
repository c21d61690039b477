import uuid

import django.core.validators
import django.db.models.deletion
import django_fsm
from django.conf import settings
from django.db import migrations, models


def _timestamps():
    return [
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
    ]


def _request_fields(related_name):
    return [
        ("flight_number", models.CharField(max_length=100)),
        (
            "offered_amount_cents",
            models.PositiveIntegerField(
                default=0,
                help_text="Amount offered in smallest currency unit (e.g., cents)",
            ),
        ),
        ("is_active", models.BooleanField(db_index=True, default=True)),
        (
            "state",
            django_fsm.FSMField(
                choices=[
                    ("open", "Open"),
                    ("matched", "Matched"),
                    ("completed", "Completed"),
                ],
                db_index=True,
                default="open",
                help_text="Current state of the request (managed by FSM)",
                max_length=50,
                protected=True,
            ),
        ),
        ("matched_at", models.DateTimeField(blank=True, null=True)),
        ("completed_at", models.DateTimeField(blank=True, null=True)),
        (
            "user",
            models.ForeignKey(
                help_text="Traveler who posted the request",
                on_delete=django.db.models.deletion.CASCADE,
                related_name=related_name,
                to=settings.AUTH_USER_MODEL,
            ),
        ),
    ]


def _offer_fields(related_name):
    return [
        ("languages", models.CharField(blank=True, default="", max_length=100)),
        ("additional_info", models.TextField(blank=True, default="")),
        ("is_available", models.BooleanField(db_index=True, default=True)),
        (
            "user",
            models.ForeignKey(
                help_text="Helper who posted the offer",
                on_delete=django.db.models.deletion.CASCADE,
                related_name=related_name,
                to=settings.AUTH_USER_MODEL,
            ),
        ),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="FlightCompanionOffer",
            fields=[
                *_timestamps(),
                *_offer_fields("flightcompanionoffers"),
                ("flight_number", models.CharField(max_length=100)),
                ("airline", models.CharField(max_length=50)),
                ("flight_date", models.DateTimeField()),
                ("departure_airport", models.CharField(max_length=3)),
                ("arrival_airport", models.CharField(max_length=3)),
                (
                    "available_services",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text='e.g. "Translation, Navigation, General Help"',
                        max_length=200,
                    ),
                ),
                ("requested_amount_cents", models.PositiveIntegerField(default=0)),
                (
                    "helped_count",
                    models.PositiveIntegerField(
                        default=0,
                        help_text="Number of matches this helper has accepted",
                    ),
                ),
            ],
            options={
                "verbose_name": "Flight companion offer",
                "verbose_name_plural": "Flight companion offers",
                "ordering": ["-created_at"],
                "abstract": False,
                "indexes": [
                    models.Index(
                        fields=["flight_number", "departure_airport", "arrival_airport"],
                        name="fc_offer_route_idx",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="FlightCompanionRequest",
            fields=[
                *_timestamps(),
                *_request_fields("flightcompanionrequests"),
                ("airline", models.CharField(max_length=50)),
                ("flight_date", models.DateTimeField()),
                ("departure_airport", models.CharField(max_length=3)),
                ("arrival_airport", models.CharField(max_length=3)),
                (
                    "traveler_name",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text='Who needs help, e.g. "My parents"',
                        max_length=100,
                    ),
                ),
                (
                    "traveler_age",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text='e.g. "Elderly", "Adult"',
                        max_length=20,
                    ),
                ),
                (
                    "special_needs",
                    models.CharField(blank=True, default="", max_length=500),
                ),
                ("additional_notes", models.TextField(blank=True, default="")),
                (
                    "matched_offer",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="matched_requests",
                        to="marketplace.flightcompanionoffer",
                    ),
                ),
            ],
            options={
                "verbose_name": "Flight companion request",
                "verbose_name_plural": "Flight companion requests",
                "ordering": ["-created_at"],
                "abstract": False,
                "indexes": [
                    models.Index(
                        fields=["flight_number", "departure_airport", "arrival_airport"],
                        name="fc_request_route_idx",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="PickupOffer",
            fields=[
                *_timestamps(),
                *_offer_fields("pickupoffers"),
                ("airport", models.CharField(db_index=True, max_length=3)),
                (
                    "vehicle_type",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text='e.g. "Sedan", "SUV", "Van"',
                        max_length=100,
                    ),
                ),
                (
                    "max_passengers",
                    models.PositiveSmallIntegerField(
                        default=4,
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                ("can_handle_luggage", models.BooleanField(default=True)),
                (
                    "service_area",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text='e.g. "Auckland City", "North Shore"',
                        max_length=200,
                    ),
                ),
                ("base_rate_cents", models.PositiveIntegerField(default=0)),
                ("total_pickups", models.PositiveIntegerField(default=0)),
            ],
            options={
                "verbose_name": "Pickup offer",
                "verbose_name_plural": "Pickup offers",
                "ordering": ["-created_at"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="PickupRequest",
            fields=[
                *_timestamps(),
                *_request_fields("pickuprequests"),
                ("arrival_date", models.DateTimeField()),
                ("airport", models.CharField(db_index=True, max_length=3)),
                ("destination_address", models.CharField(max_length=200)),
                (
                    "passenger_name",
                    models.CharField(blank=True, default="", max_length=100),
                ),
                (
                    "passenger_phone",
                    models.CharField(blank=True, default="", max_length=20),
                ),
                (
                    "passenger_count",
                    models.PositiveSmallIntegerField(
                        default=1,
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                ("has_luggage", models.BooleanField(default=True)),
                (
                    "special_requests",
                    models.CharField(blank=True, default="", max_length=500),
                ),
                (
                    "matched_offer",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="matched_requests",
                        to="marketplace.pickupoffer",
                    ),
                ),
            ],
            options={
                "verbose_name": "Pickup request",
                "verbose_name_plural": "Pickup requests",
                "ordering": ["-created_at"],
                "abstract": False,
            },
        ),
    ]
