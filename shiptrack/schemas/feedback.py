"""
ShipTrack Backend: App Feedback Schemas
========================================
"""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field


class AppFeedbackCreate(BaseModel):
    """Body of POST /api/app-feedback. Range and length rules live in FeedbackService."""
    overall_rating: int = Field(
        validation_alias=AliasChoices("overall_rating", "overallRating"),
        description="Star rating, 1-5",
    )
    best_feature: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("best_feature", "bestFeature")
    )
    missing_feature: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("missing_feature", "missingFeature")
    )
    suggestions: Optional[str] = None
    would_recommend: Optional[bool] = Field(
        default=None, validation_alias=AliasChoices("would_recommend", "wouldRecommend")
    )


class AppFeedbackResponse(BaseModel):
    id: int
    overall_rating: int
    best_feature: Optional[str] = None
    missing_feature: Optional[str] = None
    suggestions: Optional[str] = None
    would_recommend: Optional[bool] = None
    submitted_at: datetime

    model_config = {"from_attributes": True}
