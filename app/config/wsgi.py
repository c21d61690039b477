"""
WSGI entry point.

Exposes ``application`` for gunicorn or any other WSGI server. The API is
plain request/response, so no ASGI-only features are required.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_wsgi_application()
