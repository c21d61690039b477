"""
Email service for centralized email sending.

This module provides the EmailService class for sending emails with:
- Django template rendering for HTML and plain text
- Attachment handling

Configuration:
    Email settings are read from Django settings:
    - EMAIL_BACKEND
    - EMAIL_HOST, EMAIL_PORT
    - DEFAULT_FROM_EMAIL

Usage:
    from toolkit.services.email import EmailService

    EmailService.send(
        to="traveler@example.com",
        subject="Your match is confirmed",
        template_name="marketplace/match_confirmation",
        context={"payment": payment},
    )

Background delivery goes through Celery tasks (see marketplace.tasks),
which call EmailService.send and retry on failure.
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template import TemplateDoesNotExist
from django.template.loader import render_to_string
from django.utils.html import strip_tags

logger = logging.getLogger(__name__)


class EmailService:
    """
    Centralized email sending with template support.

    Templates are looked up as ``{template_name}.txt`` and
    ``{template_name}.html``; at least one of them must exist. When only the
    HTML version exists the plain-text body is derived from it.
    """

    @staticmethod
    def send(
        to: str | list[str],
        subject: str,
        template_name: str,
        context: dict,
        from_email: str | None = None,
        reply_to: str | None = None,
        attachments: list[tuple] | None = None,
        fail_silently: bool = False,
    ) -> bool:
        """
        Send email using a template.

        Args:
            to: Recipient email address(es)
            subject: Email subject line
            template_name: Name of template (without extension)
            context: Template context variables
            from_email: Sender email (defaults to DEFAULT_FROM_EMAIL)
            reply_to: Reply-to address
            attachments: List of (filename, content, mimetype) tuples
            fail_silently: Return False instead of raising on send failure

        Returns:
            True if email was sent successfully

        Raises:
            TemplateDoesNotExist: Neither template variant exists
            Exception: Whatever the mail backend raised (unless fail_silently)
        """
        recipients = [to] if isinstance(to, str) else list(to)
        from_email = from_email or settings.DEFAULT_FROM_EMAIL

        try:
            html_content = render_to_string(f"{template_name}.html", context)
        except TemplateDoesNotExist:
            html_content = None

        try:
            text_content = render_to_string(f"{template_name}.txt", context)
        except TemplateDoesNotExist:
            if html_content is None:
                raise
            text_content = strip_tags(html_content)

        email = EmailMultiAlternatives(
            subject=subject,
            body=text_content,
            from_email=from_email,
            to=recipients,
            reply_to=[reply_to] if reply_to else None,
        )

        if html_content:
            email.attach_alternative(html_content, "text/html")

        for filename, content, mimetype in attachments or []:
            email.attach(filename, content, mimetype)

        try:
            email.send(fail_silently=False)
        except Exception:
            logger.error(
                "Failed to send email",
                extra={"to": recipients, "subject": subject, "template": template_name},
                exc_info=True,
            )
            if fail_silently:
                return False
            raise

        logger.info(
            "Email sent",
            extra={"to": recipients, "subject": subject, "template": template_name},
        )
        return True
