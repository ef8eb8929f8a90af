"""
ShipTrack Backend: API Schemas
===============================

Pydantic models defining the HTTP contract with the mobile app and the
dashboard. Kept separate from the SQLAlchemy models so the wire format can
evolve independently of the table layout.
"""
