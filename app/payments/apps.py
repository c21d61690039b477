from django.apps import AppConfig


class PaymentsConfig(AppConfig):
    """Payments, escrow and disputes for both marketplaces."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "payments"
    verbose_name = "Payments & Escrow"
