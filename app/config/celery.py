"""
Celery configuration for the Django application.

Celery runs the notification emails sent after a match is confirmed and
after a service is completed, so the HTTP request that triggers them does
not wait on the mail server.

This configuration uses Redis as both the message broker and result backend.
Tasks are auto-discovered from all installed Django apps.

Usage:
    # Tasks live in each app's tasks.py:
    from marketplace.tasks import send_match_confirmation_email

    send_match_confirmation_email.delay(str(payment.id))

For more information, see:
https://docs.celeryq.dev/en/stable/django/first-steps-with-django.html
"""

import os

from celery import Celery

# Set the default Django settings module for the Celery worker
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("flightcompanion")

# All Celery settings are prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

# Celery will look for a tasks.py module in each installed app
app.autodiscover_tasks()
