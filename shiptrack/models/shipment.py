"""
ShipTrack Backend: Shipment SQLAlchemy Model
=============================================

What:  ORM model for the `shipments` table.
Who:   Used by ShipmentService (lifecycle), IssueReportService (read-only
       join for enrichment and "my issues") and StatsService (rollups).

Lifecycle:
    1. Created with status = settings.initial_shipment_status ("In afwachting")
    2. Status updates set status + last_updated_by + last_updated_at
    3. Never deleted by the application

Free-text columns:
    - assigned_to holds the assignee's username/display name, not a FK
    - expected_delivery holds whatever the dashboard date picker produced
      ("15-03-2025", "2025-03-15", ...); it is parsed only when filtering
    - weight is a display string such as "25 kg"
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Index, Integer, Numeric, String, text
from sqlalchemy.orm import Mapped, mapped_column

from shiptrack.database import Base
from shiptrack.models.types import UTCDateTime, utcnow


class Shipment(Base):
    """A trackable delivery record."""

    __tablename__ = "shipments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Never null after creation; free-text label chosen by the dashboard
    status: Mapped[str] = mapped_column(String(100), nullable=False)

    destination: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    assigned_to: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    expected_delivery: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    weight: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    # Revenue ("omzet") in euros
    revenue: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    # Audit trail, written only by status updates
    last_updated_by: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    last_updated_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)

    # assigned_to: "my shipments" lookups from the mobile app
    # created_at: yearly / monthly / daily stats range scans
    __table_args__ = (
        Index("idx_shipments_assigned_to", "assigned_to"),
        Index("idx_shipments_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Shipment(id={self.id}, status='{self.status}', "
            f"assigned_to='{self.assigned_to}')>"
        )
