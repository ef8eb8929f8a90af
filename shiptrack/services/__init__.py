"""
ShipTrack Backend: Services Layer
==================================

What:  Domain rules between routes (HTTP) and the database.
How:   Stateless service singletons. Each method takes the request-scoped
       AsyncSession as its first argument and returns Pydantic response
       models.

Service Inventory:
    - ShipmentService:     shipment lifecycle, per-assignee/per-day queries
    - IssueReportService:  issue reports, resolution state, shipment joins
    - StatsService:        yearly / monthly / daily rollups
    - FeedbackService:     in-app feedback form
    - delivery_dates:      parsing of the free-text expected_delivery column
"""
