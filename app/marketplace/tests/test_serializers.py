"""Tests for marketplace input serializers."""

import uuid

from marketplace.serializers import CompleteServiceSerializer, MatchConfirmSerializer


class TestMatchConfirmSerializer:
    def test_snake_case(self):
        request_id, offer_id = uuid.uuid4(), uuid.uuid4()
        serializer = MatchConfirmSerializer(
            data={"request_id": str(request_id), "offer_id": str(offer_id)}
        )

        assert serializer.is_valid(), serializer.errors
        assert serializer.validated_data == {"request_id": request_id, "offer_id": offer_id}

    def test_pascal_case_aliases(self):
        request_id, offer_id = uuid.uuid4(), uuid.uuid4()
        serializer = MatchConfirmSerializer(
            data={"RequestId": str(request_id), "OfferId": str(offer_id)}
        )

        assert serializer.is_valid(), serializer.errors
        assert serializer.validated_data["offer_id"] == offer_id

    def test_missing_offer(self):
        serializer = MatchConfirmSerializer(data={"request_id": str(uuid.uuid4())})

        assert not serializer.is_valid()
        assert "offer_id" in serializer.errors

    def test_invalid_uuid(self):
        serializer = MatchConfirmSerializer(data={"request_id": "abc", "offer_id": "def"})

        assert not serializer.is_valid()
        assert set(serializer.errors) == {"request_id", "offer_id"}


class TestCompleteServiceSerializer:
    def test_alias(self):
        request_id = uuid.uuid4()
        serializer = CompleteServiceSerializer(data={"RequestId": str(request_id)})

        assert serializer.is_valid(), serializer.errors
        assert serializer.validated_data == {"request_id": request_id}
