"""
ShipTrack Backend: AppFeedback SQLAlchemy Model
================================================

Answers from the in-app feedback form: a 1-5 star rating plus optional
free-text questions ("Wat vindt u het beste aan de app?", ...).
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from shiptrack.database import Base
from shiptrack.models.types import UTCDateTime, utcnow


class AppFeedback(Base):
    __tablename__ = "app_feedback"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    overall_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    best_feature: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    missing_feature: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    suggestions: Mapped[Optional[str]] = mapped_column(String(2000), nullable=True)
    would_recommend: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    submitted_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        CheckConstraint(
            "overall_rating BETWEEN 1 AND 5", name="ck_app_feedback_overall_rating"
        ),
    )

    def __repr__(self) -> str:
        return f"<AppFeedback(id={self.id}, overall_rating={self.overall_rating})>"
