# Importing the models registers them on Base.metadata (Alembic, test setup)
from shiptrack.models.feedback import AppFeedback
from shiptrack.models.issue_report import IssueReport
from shiptrack.models.shipment import Shipment

__all__ = ["AppFeedback", "IssueReport", "Shipment"]
