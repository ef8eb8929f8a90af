"""
ShipTrack Backend: App Feedback Service
========================================

What:  Stores and lists answers from the in-app feedback form.
Who:   Called by the /api/app-feedback route handlers.
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shiptrack.exceptions import DatabaseError, ValidationError
from shiptrack.models.feedback import AppFeedback
from shiptrack.models.types import utcnow
from shiptrack.schemas.feedback import AppFeedbackCreate, AppFeedbackResponse

logger = logging.getLogger(__name__)

RATING_RANGE = (1, 5)
TEXT_LIMITS = {
    "best_feature": 1000,
    "missing_feature": 1000,
    "suggestions": 2000,
}


def _clean(value: Optional[str]) -> Optional[str]:
    """Trims free text; blank answers are stored as NULL."""
    if value is None:
        return None
    value = value.strip()
    return value or None


class FeedbackService:

    async def submit_feedback(self, db: AsyncSession, data: AppFeedbackCreate) -> AppFeedbackResponse:
        """
        Validate and store one feedback submission.

        Raises:
            ValidationError: rating outside 1-5 or an answer over its limit
            DatabaseError: insert failed
        """
        texts = {field: _clean(getattr(data, field)) for field in TEXT_LIMITS}

        errors: Dict[str, List[str]] = {}
        low, high = RATING_RANGE
        if not low <= data.overall_rating <= high:
            errors["overall_rating"] = [f"Overall rating must be between {low} and {high}."]
        for field, limit in TEXT_LIMITS.items():
            if texts[field] is not None and len(texts[field]) > limit:
                errors[field] = [f"The {field} cannot exceed {limit} characters."]
        if errors:
            raise ValidationError(errors=errors)

        feedback = AppFeedback(
            overall_rating=data.overall_rating,
            would_recommend=data.would_recommend,
            submitted_at=utcnow(),
            **texts,
        )
        try:
            db.add(feedback)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error saving feedback: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save your feedback. Please try again later.",
                context={"error_type": type(e).__name__},
            ) from e

        logger.info("Feedback %s submitted (rating=%d)", feedback.id, feedback.overall_rating)
        return AppFeedbackResponse.model_validate(feedback)

    async def list_feedback(self, db: AsyncSession) -> List[AppFeedbackResponse]:
        """All feedback, newest first."""
        try:
            result = await db.execute(
                select(AppFeedback).order_by(AppFeedback.submitted_at.desc(), AppFeedback.id.desc())
            )
            rows = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing feedback: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve feedback. Please try again later.",
                context={"error_type": type(e).__name__},
            ) from e
        return [AppFeedbackResponse.model_validate(f) for f in rows]


feedback_service = FeedbackService()
