"""
ShipTrack Backend: Stats Service (Aggregation Reader)
======================================================

What:  Read-only rollups over shipments for the dashboard statistics page.
How:   Evaluated at call time against "now" in UTC; nothing is cached.
       All ranges are half-open [start, end) on created_at so that the
       created_at index is usable on PostgreSQL.

Month buckets:
    Each month is its own UTC range, aggregated with CASE in a single
    query. EXTRACT(month ...) is not used: on a TIMESTAMPTZ column it
    follows the session TimeZone, so rows near a month boundary would land
    in a different bucket than the UTC year filter assumes.

Numeric semantics:
    SUM over zero rows is NULL in SQL; every sum is wrapped in
    COALESCE(..., 0).
"""

import logging
from datetime import datetime, time, timedelta, timezone
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import and_, case, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shiptrack.exceptions import DatabaseError
from shiptrack.models.shipment import Shipment
from shiptrack.models.types import utcnow
from shiptrack.schemas.stats import MonthlyRevenue, MonthlyShipmentCount, StatsOverview

logger = logging.getLogger(__name__)

# Fixed English abbreviations; calendar.month_abbr follows the process locale
MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
                "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def _month_bounds(year: int) -> List[Tuple[datetime, datetime]]:
    """Twelve consecutive [start, end) UTC ranges covering `year`."""
    starts = [datetime(year, month, 1, tzinfo=timezone.utc) for month in range(1, 13)]
    starts.append(datetime(year + 1, 1, 1, tzinfo=timezone.utc))
    return list(zip(starts[:-1], starts[1:]))


def _day_bounds(moment: datetime) -> Tuple[datetime, datetime]:
    start = datetime.combine(moment.date(), time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


def _in_range(start: datetime, end: datetime):
    return and_(Shipment.created_at >= start, Shipment.created_at < end)


def _to_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    # SQLite returns floats for SUM over NUMERIC
    return Decimal(str(value)).quantize(Decimal("0.01"))


class StatsService:
    """Aggregations for GET /api/stats/overview."""

    async def overview(self, db: AsyncSession, now: Optional[datetime] = None) -> StatsOverview:
        """
        Build the statistics overview for the current year.

        Args:
            db: Async database session
            now: Reference time (defaults to the current UTC time). Exposed
                 so that callers and tests can evaluate a fixed moment.
        """
        now = (now or utcnow()).astimezone(timezone.utc)
        months = _month_bounds(now.year)
        year_start, year_end = months[0][0], months[-1][1]
        day_start, day_end = _day_bounds(now)

        columns = []
        for start, end in months:
            in_month = _in_range(start, end)
            columns.append(func.count(case((in_month, Shipment.id))))
            columns.append(func.coalesce(func.sum(case((in_month, Shipment.revenue))), 0))
        monthly_stmt = select(*columns).where(_in_range(year_start, year_end))
        today_stmt = select(func.count(Shipment.id)).where(_in_range(day_start, day_end))

        try:
            monthly_row = (await db.execute(monthly_stmt)).one()
            shipments_today = (await db.execute(today_stmt)).scalar() or 0
        except SQLAlchemyError as e:
            logger.error("Database error computing stats: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not compute statistics. Please try again later.",
                context={"year": now.year, "error_type": type(e).__name__},
            ) from e

        counts = [int(monthly_row[2 * i] or 0) for i in range(12)]
        revenue = [_to_decimal(monthly_row[2 * i + 1]) for i in range(12)]

        shipments_per_month = [
            MonthlyShipmentCount(month=m, label=MONTH_LABELS[m - 1], shipments=counts[m - 1])
            for m in range(1, 13)
        ]
        revenue_per_month = [
            MonthlyRevenue(month=m, label=MONTH_LABELS[m - 1], revenue=revenue[m - 1])
            for m in range(1, 13)
        ]

        return StatsOverview(
            year=now.year,
            total_shipments_year=sum(counts),
            shipments_per_month=shipments_per_month,
            revenue_year=sum(revenue, Decimal("0")),
            revenue_per_month=revenue_per_month,
            shipments_today=int(shipments_today),
        )


stats_service = StatsService()
