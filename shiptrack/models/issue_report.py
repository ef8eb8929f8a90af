"""
ShipTrack Backend: IssueReport SQLAlchemy Model
================================================

What:  ORM model for the `issue_reports` table.
Who:   Used by IssueReportService.

Relationship to Shipment:
    shipment_id is a weak reference. There is deliberately no FOREIGN KEY
    constraint: drivers report problems against ids scanned from labels, and
    a report must be accepted even when the id is unknown. Shipment rows are
    joined explicitly on read (see IssueReportService); nothing cascades.

Resolution state:
    is_fixed = true   ⇒ resolved_at is set
    is_fixed = false  ⇒ resolved_at is NULL
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, Index, Integer, String, Text, false, text
from sqlalchemy.orm import Mapped, mapped_column

from shiptrack.database import Base
from shiptrack.models.types import UTCDateTime, utcnow


class IssueReport(Base):
    """A user-submitted problem report, optionally tied to a shipment."""

    __tablename__ = "issue_reports"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Weak reference to shipments.id (no FK, see module docstring)
    shipment_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    is_important: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    is_fixed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    resolved_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)

    __table_args__ = (
        Index("idx_issue_reports_shipment_id", "shipment_id"),
        Index("idx_issue_reports_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<IssueReport(id={self.id}, title='{self.title}', "
            f"shipment_id={self.shipment_id}, is_fixed={self.is_fixed})>"
        )
