"""
Manager for the email-keyed User model.

Accounts are created by the admin, by createsuperuser and by test
factories; there is no public signup endpoint in this service.
"""

from django.contrib.auth.models import BaseUserManager


class UserManager(BaseUserManager):
    """
    Usage:
        traveler = User.objects.create_user(
            email="mei@example.com", password="...", full_name="Mei Chen"
        )
        staff = User.objects.create_superuser(email="ops@example.com", password="...")
    """

    def create_user(self, email, password=None, **extra_fields):
        """
        Create a traveler/helper account.

        Without a password the account gets an unusable one and can only
        authenticate once a password is set.

        Raises:
            ValueError: email is empty
        """
        if not email:
            raise ValueError("Users must have an email address")

        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)

        user = self.model(email=self.normalize_email(email), **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        """Staff account; staff may confirm or complete any match and resolve disputes."""
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("email_verified", True)

        for flag in ("is_staff", "is_superuser"):
            if extra_fields.get(flag) is not True:
                raise ValueError(f"Superuser must have {flag}=True.")

        return self.create_user(email, password, **extra_fields)
