"""
ShipTrack Backend: Shipment Service (Shipment Store)
=====================================================

What:  Lifecycle and queries for shipments.
How:   Stateless service; every method receives the request-scoped
       AsyncSession. Writes are flushed here and committed by
       get_db_session when the request completes.
Who:   Called by the /api/shipments route handlers.

Lifecycle:
    create_shipment  → status = settings.initial_shipment_status
    update_status    → status, last_updated_by, last_updated_at
    (no other mutation path, no deletes)

Concurrency:
    update_status is a plain read-modify-write on one row. Two concurrent
    updates of the same shipment are not ordered; the last commit wins.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shiptrack.config import settings
from shiptrack.exceptions import DatabaseError, NotFoundError, ValidationError
from shiptrack.models.shipment import Shipment
from shiptrack.models.types import utcnow
from shiptrack.schemas.shipment import ShipmentCreate, ShipmentResponse
from shiptrack.services.delivery_dates import parse_delivery_date

logger = logging.getLogger(__name__)

# Optional free-text fields copied verbatim from the create request
_TEXT_FIELDS = ("destination", "assigned_to", "expected_delivery", "weight")


def _column_length(field: str) -> int:
    return Shipment.__table__.c[field].type.length


def _revenue_errors(revenue: Optional[Decimal]) -> List[str]:
    """Revenue must fit Numeric(precision, scale) exactly; nothing is rounded."""
    if revenue is None:
        return []
    column_type = Shipment.__table__.c["revenue"].type
    scale = column_type.scale
    limit = Decimal(10) ** (column_type.precision - scale)
    if not revenue.is_finite():
        return ["The revenue must be a number."]
    if revenue < 0:
        return ["The revenue cannot be negative."]
    if revenue >= limit:
        return [f"The revenue must be less than {limit}."]
    if revenue != revenue.quantize(Decimal(1).scaleb(-scale)):
        return [f"The revenue cannot have more than {scale} decimal places."]
    return []


class ShipmentService:
    """
    Business logic layer for shipments.

    Error Handling Strategy:
        Domain rule violations raise ValidationError / NotFoundError.
        SQLAlchemy failures are logged and wrapped in DatabaseError so that
        driver details never reach the client.
    """

    async def create_shipment(self, db: AsyncSession, data: ShipmentCreate) -> ShipmentResponse:
        """
        Create a shipment in the initial status.

        Optional fields are stored exactly as received (no trimming); the
        client-facing record echoes the input.

        Raises:
            ValidationError: a text field exceeds its column length, revenue
                is negative or does not fit Numeric(12, 2) without rounding,
                or the configured initial status is blank
            DatabaseError: insert failed
        """
        errors = self._validate_create(data)
        initial_status = settings.initial_shipment_status.strip()
        if not initial_status:
            errors.setdefault("status", []).append("No initial shipment status is configured.")
        if errors:
            raise ValidationError(errors=errors)

        shipment = Shipment(
            status=initial_status,
            destination=data.destination,
            assigned_to=data.assigned_to,
            expected_delivery=data.expected_delivery,
            weight=data.weight,
            revenue=data.revenue,
            created_at=utcnow(),
        )

        try:
            db.add(shipment)
            await db.flush()  # assigns the autoincrement id
        except SQLAlchemyError as e:
            logger.error("Database error creating shipment: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the shipment. Please try again later.",
                context={"error_type": type(e).__name__},
            ) from e

        logger.info(
            "Shipment %s created (assigned_to=%s, status=%s)",
            shipment.id, shipment.assigned_to, shipment.status,
        )
        return ShipmentResponse.model_validate(shipment)

    async def get_shipment(self, db: AsyncSession, shipment_id: int) -> ShipmentResponse:
        """Returns one shipment or raises NotFoundError."""
        shipment = await self._load(db, shipment_id)
        return ShipmentResponse.model_validate(shipment)

    async def list_shipments(self, db: AsyncSession) -> List[ShipmentResponse]:
        """All shipments, ordered by id. No pagination."""
        try:
            result = await db.execute(select(Shipment).order_by(Shipment.id))
            shipments = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing shipments: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve shipments. Please try again later.",
                context={"error_type": type(e).__name__},
            ) from e
        return [ShipmentResponse.model_validate(s) for s in shipments]

    async def update_status(
        self,
        db: AsyncSession,
        shipment_id: int,
        new_status: str,
        actor: str,
    ) -> ShipmentResponse:
        """
        Move a shipment to a new status and record who did it.

        Args:
            db: Async database session
            shipment_id: Target shipment
            new_status: Free-text label ("Onderweg", "Geleverd", ...)
            actor: Username supplied by the identity layer, trusted as-is

        Raises:
            NotFoundError: no shipment with that id (nothing is written)
            ValidationError: blank or over-long status
            DatabaseError: update failed
        """
        status = (new_status or "").strip()
        max_length = _column_length("status")
        if not status:
            raise ValidationError.for_field("status", "The status field is required.")
        if len(status) > max_length:
            raise ValidationError.for_field(
                "status", f"The status must be {max_length} characters or fewer."
            )

        shipment = await self._load(db, shipment_id)

        previous = shipment.status
        shipment.status = status
        shipment.last_updated_by = actor
        shipment.last_updated_at = utcnow()

        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating shipment %s: %s", shipment_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the shipment status. Please try again later.",
                context={"shipment_id": shipment_id, "error_type": type(e).__name__},
            ) from e

        logger.info(
            "Shipment %s status '%s' → '%s' by %s", shipment_id, previous, status, actor
        )
        return ShipmentResponse.model_validate(shipment)

    async def list_for_assignee(
        self,
        db: AsyncSession,
        username: str,
        on_date: Optional[date] = None,
    ) -> List[ShipmentResponse]:
        """
        Shipments assigned to `username`, optionally due on `on_date`.

        The date filter runs in Python over the free-text expected_delivery
        column. Rows whose value does not parse are left out.
        """
        try:
            result = await db.execute(
                select(Shipment)
                .where(Shipment.assigned_to == username)
                .order_by(Shipment.id)
            )
            shipments = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing shipments for %s: %s", username, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve shipments. Please try again later.",
                context={"assigned_to": username, "error_type": type(e).__name__},
            ) from e

        if on_date is not None:
            shipments = [
                s for s in shipments
                if parse_delivery_date(s.expected_delivery) == on_date
            ]
        return [ShipmentResponse.model_validate(s) for s in shipments]

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _load(self, db: AsyncSession, shipment_id: int) -> Shipment:
        try:
            shipment = await db.get(Shipment, shipment_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching shipment %s: %s", shipment_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the shipment. Please try again later.",
                context={"shipment_id": shipment_id},
            ) from e
        if shipment is None:
            raise NotFoundError(resource="shipment", resource_id=shipment_id)
        return shipment

    @staticmethod
    def _validate_create(data: ShipmentCreate) -> Dict[str, List[str]]:
        errors: Dict[str, List[str]] = {}
        for field in _TEXT_FIELDS:
            value = getattr(data, field)
            max_length = _column_length(field)
            if value is not None and len(value) > max_length:
                errors[field] = [f"The {field} must be {max_length} characters or fewer."]
        revenue_errors = _revenue_errors(data.revenue)
        if revenue_errors:
            errors["revenue"] = revenue_errors
        return errors


# Stateless: one shared instance
shipment_service = ShipmentService()
