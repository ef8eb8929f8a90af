"""
ShipTrack Backend: Shipment Route Handlers
===========================================

What:  /api/shipments endpoints used by the dashboard (create, list, detail)
       and the driver app (my shipments, status updates).
How:   Thin handlers: parse the request, call ShipmentService, shape the
       HTTP response. Missing ids surface as NotFoundError → 404 via the
       global handlers.

Route order matters: /shipments/me* must be registered before
/shipments/{shipment_id}.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from shiptrack.database import get_db_session
from shiptrack.dependencies import get_actor
from shiptrack.models.types import utcnow
from shiptrack.schemas.common import ErrorResponse
from shiptrack.schemas.shipment import ShipmentCreate, ShipmentResponse, ShipmentStatusUpdate
from shiptrack.services.shipment_service import shipment_service


router = APIRouter(prefix="/api", tags=["Shipments"])


@router.post(
    "/shipments",
    response_model=ShipmentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Create a shipment",
)
async def create_shipment(
    payload: ShipmentCreate,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> ShipmentResponse:
    """Creates a shipment in the initial status. Location points at the new record."""
    created = await shipment_service.create_shipment(db, payload)
    response.headers["Location"] = str(request.url_for("get_shipment", shipment_id=created.id))
    return created


@router.get(
    "/shipments",
    response_model=List[ShipmentResponse],
    summary="List all shipments",
)
async def list_shipments(db: AsyncSession = Depends(get_db_session)) -> List[ShipmentResponse]:
    return await shipment_service.list_shipments(db)


@router.get(
    "/shipments/me",
    response_model=List[ShipmentResponse],
    responses={401: {"model": ErrorResponse}},
    summary="Shipments assigned to the current user",
)
async def list_my_shipments(
    on_date: Optional[date] = Query(
        default=None,
        alias="date",
        description="Only shipments whose expected delivery falls on this day (YYYY-MM-DD)",
    ),
    actor: str = Depends(get_actor),
    db: AsyncSession = Depends(get_db_session),
) -> List[ShipmentResponse]:
    return await shipment_service.list_for_assignee(db, actor, on_date)


@router.get(
    "/shipments/me/today",
    response_model=List[ShipmentResponse],
    responses={401: {"model": ErrorResponse}},
    summary="Shipments assigned to the current user that are due today (UTC)",
)
async def list_my_shipments_today(
    actor: str = Depends(get_actor),
    db: AsyncSession = Depends(get_db_session),
) -> List[ShipmentResponse]:
    return await shipment_service.list_for_assignee(db, actor, utcnow().date())


@router.get(
    "/shipments/{shipment_id}",
    response_model=ShipmentResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get a single shipment",
)
async def get_shipment(
    shipment_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> ShipmentResponse:
    return await shipment_service.get_shipment(db, shipment_id)


@router.put(
    "/shipments/{shipment_id}/status",
    response_model=ShipmentResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Update a shipment's status",
)
async def update_shipment_status(
    shipment_id: int,
    payload: ShipmentStatusUpdate,
    actor: str = Depends(get_actor),
    db: AsyncSession = Depends(get_db_session),
) -> ShipmentResponse:
    """Sets the status and records the acting user in the audit fields."""
    return await shipment_service.update_status(db, shipment_id, payload.status, actor)
