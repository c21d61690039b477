"""
Marketplace app configuration.
"""

from django.apps import AppConfig


class MarketplaceConfig(AppConfig):
    """Configuration for the marketplace application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "marketplace"
    verbose_name = "Marketplace"

    def ready(self):
        """
        Import signals when the app is ready.

        This connects the escrow_settled handler that closes requests
        after a dispute is resolved.
        """
        from marketplace import signals  # noqa: F401
