"""
Pagination classes for payments API.

Cursor pagination keeps history pages stable while new payments are
created during a match.
"""

from rest_framework.pagination import CursorPagination


class PaymentCursorPagination(CursorPagination):
    """
    Cursor pagination for payment history and dispute lists.

    Newest first, using (created_at, id) for a stable cursor position.

    Default: 20 items per page
    Maximum: 100 items per page
    """

    page_size = 20
    max_page_size = 100
    page_size_query_param = "page_size"
    ordering = ("-created_at", "-id")
    cursor_query_param = "cursor"
