"""
ShipTrack Backend: Shipment Schemas
====================================

Request and response bodies for /api/shipments.
"""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field

from shiptrack.schemas.common import Money


class ShipmentCreate(BaseModel):
    """
    Body of POST /api/shipments.

    Every field is optional. The status is not accepted from the client:
    new shipments always start in the configured initial status. Length,
    sign and precision rules are enforced by ShipmentService so that they
    surface as field-level validation errors.

    The driver app and dashboard send camelCase keys (assignedTo,
    expectedDelivery); both spellings are accepted. `omzet` is accepted as
    an alias for `revenue` (older dashboard builds).
    """
    destination: Optional[str] = Field(default=None, description="Delivery address / city")
    assigned_to: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("assigned_to", "assignedTo"),
        description="Assignee username",
    )
    expected_delivery: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("expected_delivery", "expectedDelivery"),
        description="Expected delivery date as entered (e.g. 15-03-2025)",
    )
    weight: Optional[str] = Field(default=None, description="Weight as entered (e.g. '25 kg')")
    revenue: Optional[Money] = Field(
        default=None,
        validation_alias=AliasChoices("revenue", "omzet"),
        description="Revenue in euros, at most two decimals",
    )


class ShipmentStatusUpdate(BaseModel):
    """Body of PUT /api/shipments/{id}/status."""
    status: str = Field(description="New status label, e.g. 'Onderweg'")


class ShipmentResponse(BaseModel):
    id: int
    status: str
    destination: Optional[str] = None
    assigned_to: Optional[str] = None
    expected_delivery: Optional[str] = None
    weight: Optional[str] = None
    revenue: Optional[Money] = None
    created_at: datetime
    last_updated_by: Optional[str] = None
    last_updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
