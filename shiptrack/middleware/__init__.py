"""
ShipTrack Backend: Middleware Package
======================================

Middleware Chain (request direction):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route

    1. Rate Limit rejects abusive clients before any other work
    2. Request ID assigns the correlation id used by every log line
    3. Logging records method, path, status and duration
"""
