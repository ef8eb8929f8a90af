"""
ShipTrack Backend: Shared Schemas
==================================

Error/health payloads and the Money type used by every revenue field.
"""

from decimal import Decimal
from typing import Annotated, Dict, List, Optional

from pydantic import BaseModel, Field, PlainSerializer


# Decimal in Python, plain JSON number on the wire (the dashboard charts
# revenue with recharts, which needs numbers, not strings). Stored amounts
# are Numeric(12, 2), well inside the 15 significant digits a float
# round-trips exactly.
Money = Annotated[
    Decimal,
    PlainSerializer(lambda v: float(v), return_type=float, when_used="json"),
]


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {
            "error": "validation_error",
            "message": "Validation failed",
            "errors": {"shipment_id": ["The shipment_id must be a positive number."]},
            "request_id": "550e8400"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    errors: Optional[Dict[str, List[str]]] = Field(
        default=None, description="Field name → validation messages"
    )
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
