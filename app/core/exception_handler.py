"""
Central DRF exception handler.

Configured via REST_FRAMEWORK["EXCEPTION_HANDLER"]. Translates the
application exception hierarchy (core.exceptions) into HTTP responses
with a structured body, defers framework exceptions (serializer
validation, authentication, 404 from get_object_or_404) to DRF, and turns
anything else into a generic 500 without leaking internals.

Response body:
    {"error": "...", "error_code": "...", "details": {...}}
"""

from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from core.exceptions import BaseApplicationError

logger = logging.getLogger(__name__)

GENERIC_ERROR_BODY = {
    "error": "An unexpected error occurred",
    "error_code": "INTERNAL_SERVER_ERROR",
}


def api_exception_handler(exc, context):
    """
    Map an exception raised inside a DRF view to a Response.

    Args:
        exc: The raised exception
        context: DRF context dict (contains "view" and "request")

    Returns:
        Response with the mapped status and structured error body
    """
    view = context.get("view")
    view_name = view.__class__.__name__ if view is not None else None

    if isinstance(exc, BaseApplicationError):
        log_level = logging.WARNING if exc.status_code < 500 else logging.ERROR
        logger.log(
            log_level,
            "Request failed with application error",
            extra={
                "view": view_name,
                "error_code": exc.error_code,
                "status_code": exc.status_code,
            },
        )
        return Response(exc.to_dict(), status=exc.status_code)

    response = drf_exception_handler(exc, context)
    if response is not None:
        return response

    logger.error(
        f"Unhandled exception in {view_name}: {type(exc).__name__}",
        extra={"view": view_name},
        exc_info=exc,
    )
    return Response(
        dict(GENERIC_ERROR_BODY),
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
