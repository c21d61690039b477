"""
Base service layer patterns for business logic encapsulation.

Services encapsulate business logic separate from views and models.
Views handle HTTP concerns, models handle data, services handle logic.
Failures are raised as core.exceptions subclasses and translated to HTTP
responses by the central exception handler.

Usage:
    from core.services import BaseService

    class MatchConfirmationService(BaseService):
        @classmethod
        def confirm(cls, request_id, offer_id):
            with cls.atomic():
                ...
            cls.get_logger().info("Match confirmed", extra={...})
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

from django.db import transaction

from core.exceptions import ValidationError

if TYPE_CHECKING:
    from collections.abc import Generator


class BaseService:
    """
    Base class for service layer classes.

    Design Notes:
        - Use @classmethod (no instance state) unless a collaborator
          is injected through __init__
        - Raise core.exceptions subclasses for business-rule failures
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Get a logger named after the service class."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Execute operations in a database transaction.

        Any exception raised inside the block rolls back every write made
        in it, including writes made by nested service calls.
        """
        with transaction.atomic():
            yield

    @classmethod
    def validate_required(cls, **kwargs) -> None:
        """
        Validate that required fields are provided.

        Raises:
            ValidationError: If any field is None or a blank string
        """
        errors = {}
        for field_name, value in kwargs.items():
            if value is None or (isinstance(value, str) and not value.strip()):
                errors[field_name] = ["This field is required."]

        if errors:
            raise ValidationError(
                "Required fields missing",
                details=errors,
            )
