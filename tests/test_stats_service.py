"""
ShipTrack Backend: Stats Service Tests
=======================================

What we test:
    ✅ Empty year: zero totals, twelve zero-filled buckets
    ✅ Month buckets sum to the yearly totals
    ✅ Rows outside the current year / today are excluded
    ✅ Shipments without revenue count but add nothing to revenue
    ✅ Month buckets are UTC ranges (boundary rows, no EXTRACT)
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from shiptrack.exceptions import DatabaseError
from shiptrack.services.stats_service import MONTH_LABELS, StatsService

NOW = datetime(2025, 3, 15, 12, 0, tzinfo=timezone.utc)


class TestStatsOverview:

    def setup_method(self):
        self.service = StatsService()

    @pytest.mark.asyncio
    async def test_empty_database_reports_zeros(self, db_session):
        result = await self.service.overview(db_session, now=NOW)

        assert result.year == 2025
        assert result.total_shipments_year == 0
        assert result.revenue_year == Decimal("0")
        assert result.shipments_today == 0
        assert [m.month for m in result.shipments_per_month] == list(range(1, 13))
        assert all(m.shipments == 0 for m in result.shipments_per_month)
        assert all(m.revenue == Decimal("0") for m in result.revenue_per_month)
        assert [m.label for m in result.revenue_per_month] == list(MONTH_LABELS)

    @pytest.mark.asyncio
    async def test_monthly_buckets_and_totals(self, db_session, make_shipment):
        await make_shipment(revenue="100.00", created_at=datetime(2025, 1, 10, tzinfo=timezone.utc))
        await make_shipment(revenue="50.25", created_at=datetime(2025, 1, 31, 23, 59, tzinfo=timezone.utc))
        await make_shipment(revenue="200.00", created_at=datetime(2025, 3, 1, tzinfo=timezone.utc))
        await make_shipment(revenue=None, created_at=datetime(2025, 3, 2, tzinfo=timezone.utc))
        # Previous year: excluded
        await make_shipment(revenue="999.00", created_at=datetime(2024, 12, 31, 23, 59, tzinfo=timezone.utc))

        result = await self.service.overview(db_session, now=NOW)

        counts = {m.month: m.shipments for m in result.shipments_per_month}
        revenue = {m.month: m.revenue for m in result.revenue_per_month}

        assert counts[1] == 2
        assert counts[3] == 2
        assert counts[2] == 0
        assert revenue[1] == Decimal("150.25")
        assert revenue[3] == Decimal("200.00")
        assert revenue[12] == Decimal("0")

        assert result.total_shipments_year == 4
        assert result.total_shipments_year == sum(counts.values())
        assert result.revenue_year == Decimal("350.25")
        assert result.revenue_year == sum(revenue.values(), Decimal("0"))

    @pytest.mark.asyncio
    async def test_shipments_today_uses_utc_day(self, db_session, make_shipment):
        await make_shipment(created_at=NOW.replace(hour=0, minute=0))
        await make_shipment(created_at=NOW.replace(hour=23, minute=59))
        await make_shipment(created_at=NOW - timedelta(days=1))
        await make_shipment(created_at=NOW + timedelta(days=1))

        result = await self.service.overview(db_session, now=NOW)

        assert result.shipments_today == 2
        assert result.total_shipments_year == 4

    @pytest.mark.asyncio
    async def test_overview_json_has_numeric_revenue(self, db_session, make_shipment):
        await make_shipment(revenue="12.50", created_at=NOW)

        payload = (await self.service.overview(db_session, now=NOW)).model_dump(mode="json")

        assert payload["revenue_year"] == 12.5
        assert payload["revenue_per_month"][2]["revenue"] == 12.5

    @pytest.mark.asyncio
    async def test_month_boundaries_follow_utc(self, db_session, make_shipment):
        await make_shipment(revenue="10.00", created_at=datetime(2025, 1, 31, 23, 30, tzinfo=timezone.utc))
        await make_shipment(revenue="20.00", created_at=datetime(2025, 2, 1, 0, 0, tzinfo=timezone.utc))
        await make_shipment(revenue="30.00", created_at=datetime(2025, 12, 31, 23, 30, tzinfo=timezone.utc))
        # 2025-01-01T00:30+02:00 is still 2024 in UTC
        await make_shipment(
            revenue="40.00",
            created_at=datetime(2025, 1, 1, 0, 30, tzinfo=timezone(timedelta(hours=2))),
        )

        result = await self.service.overview(db_session, now=NOW)

        counts = {m.month: m.shipments for m in result.shipments_per_month}
        revenue = {m.month: m.revenue for m in result.revenue_per_month}
        assert (counts[1], counts[2], counts[12]) == (1, 1, 1)
        assert (revenue[1], revenue[2], revenue[12]) == (Decimal("10.00"), Decimal("20.00"), Decimal("30.00"))
        assert result.total_shipments_year == 3

    @pytest.mark.asyncio
    async def test_month_buckets_use_utc_ranges_not_extract(self, mock_db_session):
        result_proxy = MagicMock()
        result_proxy.one.return_value = (0,) * 24
        result_proxy.scalar.return_value = 0
        mock_db_session.execute.return_value = result_proxy

        await self.service.overview(mock_db_session, now=NOW)

        monthly_stmt = mock_db_session.execute.await_args_list[0].args[0]
        sql = str(monthly_stmt.compile(dialect=postgresql.dialect())).upper()
        assert "EXTRACT" not in sql
        assert sql.count("CASE WHEN") == 24

    @pytest.mark.asyncio
    async def test_database_failure(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))

        with pytest.raises(DatabaseError):
            await self.service.overview(mock_db_session, now=NOW)
