"""
ShipTrack Backend: API Routes Package
======================================

Route Inventory:
    - shipments.py:      /api/shipments, /api/shipments/me, /me/today,
                         /api/shipments/{id}, /api/shipments/{id}/status
    - issue_reports.py:  /api/issue-reports (+ /shipment/{id},
                         /assigned-to/{username}, /{id})
    - stats.py:          /api/stats/overview
    - feedback.py:       /api/app-feedback
    - health.py:         /health

Routes stay thin: extract input, call a service, set status/headers.
"""
