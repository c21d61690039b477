from django.apps import AppConfig


class AuthenticationConfig(AppConfig):
    """Custom email-based User model for travelers and helpers."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "authentication"
    verbose_name = "Users"
