"""
ShipTrack Backend: Statistics Schemas
======================================

Payload of GET /api/stats/overview. Month buckets always contain twelve
entries (January first), zero-filled.
"""

from typing import List

from pydantic import BaseModel, Field

from shiptrack.schemas.common import Money


class MonthlyShipmentCount(BaseModel):
    month: int = Field(ge=1, le=12)
    label: str = Field(description="Short month name, e.g. 'Jan'")
    shipments: int


class MonthlyRevenue(BaseModel):
    month: int = Field(ge=1, le=12)
    label: str
    revenue: Money


class StatsOverview(BaseModel):
    year: int
    total_shipments_year: int
    shipments_per_month: List[MonthlyShipmentCount]
    revenue_year: Money
    revenue_per_month: List[MonthlyRevenue]
    shipments_today: int
