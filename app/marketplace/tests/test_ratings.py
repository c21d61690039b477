"""Tests for RatingService and the /api/ratings/ endpoints."""

import datetime
import uuid

import pytest
from freezegun import freeze_time
from rest_framework import status

from core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from marketplace.models import Rating
from marketplace.services import (
    MatchConfirmationService,
    RatingService,
    ServiceCompletionService,
)
from marketplace.services.ratings import rating_edit_window
from marketplace.tests.factories import (
    FlightCompanionOfferFactory,
    FlightCompanionRequestFactory,
    RatingFactory,
)
from payments.state_machines import RequestType

RATINGS_URL = "/api/ratings/"


@pytest.mark.django_db
class TestSubmitRating:
    def test_traveler_rates_helper(self, completed_fc_match, traveler, helper):
        rating = RatingService.submit_rating(
            RequestType.FLIGHT_COMPANION,
            completed_fc_match.request.id,
            traveler,
            score=5,
            comment="  Looked after my parents  ",
        )

        assert rating.rater == traveler
        assert rating.rated_user == helper
        assert rating.request_id == completed_fc_match.request.id
        assert rating.score == 5
        assert rating.comment == "Looked after my parents"
        assert rating.is_public is True

    def test_helper_rates_traveler(self, completed_fc_match, traveler, helper):
        rating = RatingService.submit_rating(
            "flight_companion", str(completed_fc_match.request.id), helper, score=4
        )

        assert rating.rated_user == traveler

    def test_second_rating_conflicts(self, completed_fc_match, traveler):
        RatingService.submit_rating(
            RequestType.FLIGHT_COMPANION, completed_fc_match.request.id, traveler, 5
        )

        with pytest.raises(ConflictError) as exc_info:
            RatingService.submit_rating(
                RequestType.FLIGHT_COMPANION, completed_fc_match.request.id, traveler, 3
            )

        assert exc_info.value.error_code == "ALREADY_RATED"
        assert exc_info.value.message == "You have already rated this service"
        assert Rating.objects.count() == 1

    def test_both_parties_may_rate(self, completed_fc_match, traveler, helper):
        RatingService.submit_rating(
            RequestType.FLIGHT_COMPANION, completed_fc_match.request.id, traveler, 5
        )
        RatingService.submit_rating(
            RequestType.FLIGHT_COMPANION, completed_fc_match.request.id, helper, 5
        )

        assert Rating.objects.count() == 2

    def test_matched_but_not_completed(self, fc_match, traveler):
        with pytest.raises(ConflictError) as exc_info:
            RatingService.submit_rating(
                RequestType.FLIGHT_COMPANION, fc_match.request.id, traveler, 5
            )

        assert exc_info.value.error_code == "SERVICE_NOT_COMPLETED"

    def test_open_request(self, fc_request, traveler):
        with pytest.raises(ConflictError) as exc_info:
            RatingService.submit_rating(
                RequestType.FLIGHT_COMPANION, fc_request.id, traveler, 5
            )

        assert exc_info.value.error_code == "SERVICE_NOT_COMPLETED"

    def test_outsider_rejected(self, completed_fc_match, outsider):
        with pytest.raises(PermissionDeniedError):
            RatingService.submit_rating(
                RequestType.FLIGHT_COMPANION, completed_fc_match.request.id, outsider, 1
            )

    def test_self_rating_rejected(self, escrow_service, traveler):
        """A traveler who matched their own offer still cannot rate themselves."""
        request = FlightCompanionRequestFactory(user=traveler)
        offer = FlightCompanionOfferFactory(user=traveler, flight_date=request.flight_date)
        MatchConfirmationService.confirm_flight_companion_match(
            request.id, offer.id, escrow_service=escrow_service
        )
        ServiceCompletionService.complete_service(
            request.id, RequestType.FLIGHT_COMPANION, escrow_service=escrow_service
        )

        with pytest.raises(ValidationError) as exc_info:
            RatingService.submit_rating(
                RequestType.FLIGHT_COMPANION, request.id, traveler, 5
            )

        assert exc_info.value.error_code == "SELF_RATING"

    @pytest.mark.parametrize("score", [0, 6, -1, True, "5"])
    def test_score_out_of_range(self, completed_fc_match, traveler, score):
        with pytest.raises(ValidationError) as exc_info:
            RatingService.submit_rating(
                RequestType.FLIGHT_COMPANION, completed_fc_match.request.id, traveler, score
            )

        assert "score" in exc_info.value.details

    def test_unknown_request_type(self, traveler):
        with pytest.raises(ValidationError):
            RatingService.submit_rating("taxi", uuid.uuid4(), traveler, 5)

    def test_unknown_request(self, db, traveler):
        with pytest.raises(NotFoundError) as exc_info:
            RatingService.submit_rating(
                RequestType.PICKUP, uuid.uuid4(), traveler, 5
            )

        assert exc_info.value.error_code == "REQUEST_NOT_FOUND"

    def test_wrong_marketplace(self, completed_fc_match, traveler):
        with pytest.raises(NotFoundError):
            RatingService.submit_rating(
                RequestType.PICKUP, completed_fc_match.request.id, traveler, 5
            )


@pytest.mark.django_db
class TestUpdateRating:
    def test_rater_edits(self, db):
        rating = RatingFactory(score=2, is_public=True)

        updated = RatingService.update_rating(
            rating.id, rating.rater, {"score": 4, "is_public": False}
        )

        assert updated.score == 4
        assert updated.is_public is False
        assert updated.comment == "Very helpful"

    def test_other_user_rejected(self, db, outsider):
        rating = RatingFactory()

        with pytest.raises(PermissionDeniedError):
            RatingService.update_rating(rating.id, outsider, {"score": 1})

    def test_locked_after_window(self, db, settings):
        settings.MARKETPLACE_RATING_EDIT_WINDOW_HOURS = 24
        with freeze_time("2026-03-01 09:00:00"):
            rating = RatingFactory()

        with freeze_time("2026-03-02 09:00:01"):
            with pytest.raises(ConflictError) as exc_info:
                RatingService.update_rating(rating.id, rating.rater, {"score": 1})

        assert exc_info.value.error_code == "RATING_LOCKED"
        assert Rating.objects.get(id=rating.id).score == 5

    def test_unknown_rating(self, db, traveler):
        with pytest.raises(NotFoundError) as exc_info:
            RatingService.update_rating(uuid.uuid4(), traveler, {"score": 3})

        assert exc_info.value.error_code == "RATING_NOT_FOUND"


@pytest.mark.django_db
class TestRatingQueries:
    def test_private_ratings_hidden_from_others(self, traveler, helper, outsider):
        public = RatingFactory(rater=traveler, rated_user=helper)
        private = RatingFactory(rater=traveler, rated_user=helper, is_public=False)

        assert list(RatingService.ratings_for_user(helper.id, outsider)) == [public]
        assert set(RatingService.ratings_for_user(helper.id, helper)) == {public, private}

    def test_ratings_for_unknown_user(self, db, traveler):
        with pytest.raises(NotFoundError) as exc_info:
            RatingService.ratings_for_user(999999, traveler)

        assert exc_info.value.error_code == "USER_NOT_FOUND"

    def test_summary(self, helper):
        RatingFactory(rated_user=helper, score=5)
        RatingFactory(rated_user=helper, score=4)
        RatingFactory(rated_user=helper, score=4, is_public=False)

        assert RatingService.summary_for_user(helper.id) == {
            "average_score": 4.33,
            "total_ratings": 3,
        }

    def test_summary_without_ratings(self, helper):
        assert RatingService.summary_for_user(helper.id) == {
            "average_score": None,
            "total_ratings": 0,
        }

    def test_ratings_for_service(self, traveler, helper, outsider):
        request_id = uuid.uuid4()
        public = RatingFactory(request_id=request_id, rater=traveler, rated_user=helper)
        private = RatingFactory(
            request_id=request_id, rater=helper, rated_user=traveler, is_public=False
        )
        RatingFactory(request_id=request_id, request_type=RequestType.PICKUP)

        assert list(
            RatingService.ratings_for_service(
                RequestType.FLIGHT_COMPANION, request_id, outsider
            )
        ) == [public]
        assert set(
            RatingService.ratings_for_service(
                RequestType.FLIGHT_COMPANION, request_id, traveler
            )
        ) == {public, private}

    def test_get_private_rating(self, traveler, helper, outsider):
        rating = RatingFactory(rater=traveler, rated_user=helper, is_public=False)

        assert RatingService.get_rating(rating.id, helper) == rating
        with pytest.raises(PermissionDeniedError):
            RatingService.get_rating(rating.id, outsider)


class TestRatingViews:
    def test_submit(self, authenticated_client_factory, completed_fc_match, traveler, helper):
        response = authenticated_client_factory(traveler).post(
            RATINGS_URL,
            {
                "request_type": "flight_companion",
                "request_id": str(completed_fc_match.request.id),
                "score": 5,
                "comment": "Great company",
            },
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["score"] == 5
        assert response.data["rated_user"]["id"] == helper.id

    def test_submit_pascal_case(self, authenticated_client_factory, completed_fc_match, helper):
        response = authenticated_client_factory(helper).post(
            RATINGS_URL,
            {
                "RequestType": "flight_companion",
                "RequestId": str(completed_fc_match.request.id),
                "score": 4,
            },
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED

    def test_duplicate_is_409(self, authenticated_client_factory, completed_fc_match, traveler):
        client = authenticated_client_factory(traveler)
        body = {
            "request_type": "flight_companion",
            "request_id": str(completed_fc_match.request.id),
            "score": 5,
        }
        client.post(RATINGS_URL, body, format="json")

        response = client.post(RATINGS_URL, body, format="json")

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["error_code"] == "ALREADY_RATED"

    def test_score_validated(self, authenticated_client_factory, completed_fc_match, traveler):
        response = authenticated_client_factory(traveler).post(
            RATINGS_URL,
            {
                "request_type": "flight_companion",
                "request_id": str(completed_fc_match.request.id),
                "score": 6,
            },
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_requires_auth(self, api_client, db):
        response = api_client.post(RATINGS_URL, {}, format="json")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_detail_and_edit(self, authenticated_client_factory, traveler):
        rating = RatingFactory(rater=traveler, score=3)
        client = authenticated_client_factory(traveler)

        assert client.get(f"{RATINGS_URL}{rating.id}/").data["score"] == 3

        response = client.patch(
            f"{RATINGS_URL}{rating.id}/", {"score": 5}, format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["score"] == 5

    def test_user_ratings_with_summary(self, authenticated_client_factory, outsider, helper):
        RatingFactory(rated_user=helper, score=5)
        RatingFactory(rated_user=helper, score=3)

        response = authenticated_client_factory(outsider).get(
            f"{RATINGS_URL}user/{helper.id}/"
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["count"] == 2
        assert response.data["summary"] == {"average_score": 4.0, "total_ratings": 2}

    def test_service_ratings(self, authenticated_client_factory, outsider):
        rating = RatingFactory()

        response = authenticated_client_factory(outsider).get(
            f"{RATINGS_URL}service/flight_companion/{rating.request_id}/"
        )

        assert [r["id"] for r in response.data] == [str(rating.id)]

    def test_service_ratings_bad_type(self, authenticated_client_factory, outsider):
        response = authenticated_client_factory(outsider).get(
            f"{RATINGS_URL}service/taxi/{uuid.uuid4()}/"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_edit_window_setting(settings):
    settings.MARKETPLACE_RATING_EDIT_WINDOW_HOURS = 2

    assert rating_edit_window() == datetime.timedelta(hours=2)
