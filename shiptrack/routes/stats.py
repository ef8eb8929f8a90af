"""
ShipTrack Backend: Statistics Route
====================================
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shiptrack.database import get_db_session
from shiptrack.schemas.stats import StatsOverview
from shiptrack.services.stats_service import stats_service

router = APIRouter(prefix="/api", tags=["Stats"])


@router.get(
    "/stats/overview",
    response_model=StatsOverview,
    summary="Shipment and revenue totals for the current year",
)
async def stats_overview(db: AsyncSession = Depends(get_db_session)) -> StatsOverview:
    """Recomputed on every call; no caching."""
    return await stats_service.overview(db)
