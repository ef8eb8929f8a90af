"""
ShipTrack Backend: Request Dependencies
========================================

Identity:
    Authentication is handled upstream. The authenticated username reaches
    this service in a trusted header (settings.actor_header, "X-Actor" by
    default) and is used as-is for audit fields and "my ..." queries.
"""

from fastapi import Request

from shiptrack.config import settings
from shiptrack.exceptions import AuthenticationRequiredError


async def get_actor(request: Request) -> str:
    """
    Returns the acting username for the current request.

    Raises:
        AuthenticationRequiredError: header missing or blank (→ 401)
    """
    actor = request.headers.get(settings.actor_header, "").strip()
    if not actor:
        raise AuthenticationRequiredError(
            context={"header": settings.actor_header, "path": request.url.path}
        )
    return actor
