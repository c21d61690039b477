"""
Authentication application.

Provides the email-based User model shared by travelers, helpers and
staff. Login itself is handled by djangorestframework-simplejwt.

Usage:
    from authentication.models import User
"""
