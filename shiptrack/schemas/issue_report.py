"""
ShipTrack Backend: Issue Report Schemas
========================================

Request and response bodies for /api/issue-reports.

Partial updates:
    IssueReportUpdate declares every field optional. Presence is read from
    the model's set fields (model_dump(exclude_unset=True)), never from
    None checks, so `{"description": null}` (clear it) and `{}` (leave it
    alone) stay distinguishable.
"""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field

from shiptrack.schemas.shipment import ShipmentResponse


class IssueReportCreate(BaseModel):
    """
    Body of POST /api/issue-reports.

    `title` is declared as a plain string here; emptiness, length and
    shipment_id sign are checked in IssueReportService. camelCase keys
    (imageUrl, shipmentId) are accepted as sent by the driver app.
    """
    title: str = Field(description="Short problem description (max 255 chars)")
    description: Optional[str] = None
    image_url: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("image_url", "imageUrl")
    )
    shipment_id: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("shipment_id", "shipmentId"),
        description="Related shipment id (not checked for existence)",
    )


class IssueReportUpdate(BaseModel):
    """
    Body of PUT/PATCH /api/issue-reports/{id}. Omitted fields are left unchanged.

    The dashboard sends camelCase keys (isFixed, resolvedAt, ...); a field
    given under either spelling counts as present.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("image_url", "imageUrl")
    )
    shipment_id: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("shipment_id", "shipmentId")
    )
    is_important: Optional[bool] = Field(
        default=None, validation_alias=AliasChoices("is_important", "isImportant")
    )
    is_fixed: Optional[bool] = Field(
        default=None, validation_alias=AliasChoices("is_fixed", "isFixed")
    )
    resolved_at: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices("resolved_at", "resolvedAt")
    )


class IssueReportResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    shipment_id: Optional[int] = None
    created_at: datetime
    is_important: bool
    is_fixed: bool
    resolved_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class IssueReportWithShipment(IssueReportResponse):
    """
    Issue report enriched with its shipment.

    `shipment` is null when shipment_id is null or points at a shipment that
    does not exist.
    """
    shipment: Optional[ShipmentResponse] = None
