"""
ShipTrack Backend: Application Package
=======================================

What: Backend for the ShipTrack logistics app (mobile app + web dashboard).
How:  Layered FastAPI application:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Domain Rules)     │  ← Validation, lifecycle, queries
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Services never open their own sessions. Each call receives the
    request-scoped AsyncSession from the route layer.
"""

__version__ = "1.0.0"
