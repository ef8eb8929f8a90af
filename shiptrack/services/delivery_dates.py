"""
ShipTrack Backend: Expected-Delivery Date Parsing
==================================================

What:  Best-effort conversion of the free-text `expected_delivery` column
       into a calendar date.
Who:   ShipmentService.list_for_assignee when filtering by day.

Accepted inputs:
    2025-03-15, 2025-03-15T09:30:00(+01:00)   ISO 8601 (HTML date inputs)
    2025-03-15T09:30:00Z                       ISO 8601 from JS toISOString()
    15-03-2025, 15-3-2025                      nl-NL toLocaleDateString
    15/03/2025, 15.03.2025                     hand-typed variants

Day-first is assumed for the non-ISO forms. Anything else yields None; an
unparseable value simply never matches a date filter.
"""

from datetime import date, datetime
from typing import Optional

DAY_FIRST_FORMATS = ("%d-%m-%Y", "%d/%m/%Y", "%d.%m.%Y")


def parse_delivery_date(value: Optional[str]) -> Optional[date]:
    """Returns the calendar date encoded in `value`, or None."""
    if not value:
        return None
    text = value.strip()
    if not text:
        return None

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass

    for fmt in DAY_FIRST_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None
