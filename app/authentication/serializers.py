"""
DRF serializers for authentication app.

Related files:
    - models.py: User
"""

from __future__ import annotations

from rest_framework import serializers

from authentication.models import User


class UserSerializer(serializers.ModelSerializer):
    """
    Public view of a User, embedded in requests, offers and payments.

    Contact details (email, phone) are not exposed here; they are shared
    with the other party by email once a match is confirmed.
    """

    full_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["id", "full_name"]
        read_only_fields = fields

    def get_full_name(self, obj) -> str:
        """Return the display name (falls back to email)."""
        return obj.get_full_name()
