"""
ShipTrack Backend: App Feedback Service Tests
==============================================
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from shiptrack.exceptions import ValidationError
from shiptrack.schemas.feedback import AppFeedbackCreate
from shiptrack.services.feedback_service import FeedbackService

NOW = datetime(2025, 5, 27, 10, 0, tzinfo=timezone.utc)


class TestSubmitFeedback:

    def setup_method(self):
        self.service = FeedbackService()

    @pytest.mark.asyncio
    async def test_submit_trims_answers(self, db_session):
        result = await self.service.submit_feedback(
            db_session,
            AppFeedbackCreate(
                overall_rating=4,
                best_feature="  QR scannen ",
                missing_feature="   ",
                would_recommend=True,
            ),
        )

        assert result.id > 0
        assert result.overall_rating == 4
        assert result.best_feature == "QR scannen"
        assert result.missing_feature is None
        assert result.suggestions is None
        assert result.would_recommend is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rating", [0, 6, -1])
    async def test_rating_out_of_range(self, db_session, rating):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.submit_feedback(db_session, AppFeedbackCreate(overall_rating=rating))
        assert "overall_rating" in exc_info.value.errors

    @pytest.mark.asyncio
    async def test_answer_length_limits(self, db_session):
        await self.service.submit_feedback(
            db_session, AppFeedbackCreate(overall_rating=5, suggestions="x" * 2000)
        )

        with pytest.raises(ValidationError) as exc_info:
            await self.service.submit_feedback(
                db_session,
                AppFeedbackCreate(overall_rating=5, best_feature="x" * 1001, suggestions="x" * 2001),
            )
        assert set(exc_info.value.errors) == {"best_feature", "suggestions"}

    @pytest.mark.asyncio
    async def test_list_newest_first(self, db_session):
        with patch("shiptrack.services.feedback_service.utcnow", return_value=NOW - timedelta(days=1)):
            older = await self.service.submit_feedback(db_session, AppFeedbackCreate(overall_rating=3))
        with patch("shiptrack.services.feedback_service.utcnow", return_value=NOW):
            newer = await self.service.submit_feedback(db_session, AppFeedbackCreate(overall_rating=5))

        result = await self.service.list_feedback(db_session)

        assert [f.id for f in result] == [newer.id, older.id]

    def test_camel_case_keys_accepted(self):
        payload = AppFeedbackCreate.model_validate(
            {"overallRating": 4, "bestFeature": "Kaart", "wouldRecommend": False}
        )

        assert payload.overall_rating == 4
        assert payload.best_feature == "Kaart"
        assert payload.would_recommend is False
