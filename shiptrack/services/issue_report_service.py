"""
ShipTrack Backend: Issue Report Service (Issue Report Store)
=============================================================

What:  Creation, partial update and queries for issue reports, including
       the cross-entity rules that bind reports to shipments.
Who:   Called by the /api/issue-reports route handlers.

Cross-entity rules:
    - shipment_id is a weak reference: any non-negative integer is accepted,
      existence is never checked, nothing cascades.
    - Enrichment is an outer join: a dangling shipment_id yields
      `shipment: null`, never an error.
    - "Issues assigned to user X" is an inner join on
      IssueReport.shipment_id = Shipment.id filtered by Shipment.assigned_to.
      It is a computed view, evaluated on every call.

Resolution state (update_issue):
    is_fixed present, true   → resolved_at = payload.resolved_at or now
    is_fixed present, false  → resolved_at = NULL (payload resolved_at ignored)
    is_fixed absent, resolved_at present (non-null)
                             → is_fixed = true, resolved_at = payload value
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shiptrack.exceptions import DatabaseError, NotFoundError, ValidationError
from shiptrack.models.issue_report import IssueReport
from shiptrack.models.shipment import Shipment
from shiptrack.models.types import utcnow
from shiptrack.schemas.issue_report import (
    IssueReportCreate,
    IssueReportResponse,
    IssueReportUpdate,
    IssueReportWithShipment,
)
from shiptrack.schemas.shipment import ShipmentResponse

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 255

# Fields that may be omitted from an update but never set to null
_NON_NULLABLE_UPDATE_FIELDS = ("title", "is_important", "is_fixed")


def _trim(value: Optional[str]) -> Optional[str]:
    return value.strip() if value is not None else None


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _title_errors(title: Optional[str]) -> List[str]:
    if title is None or not title.strip():
        return ["The title field is required."]
    if len(title) > TITLE_MAX_LENGTH:
        return [f"The title must be {TITLE_MAX_LENGTH} characters or fewer."]
    return []


def _shipment_id_errors(shipment_id: Optional[int]) -> List[str]:
    if shipment_id is not None and shipment_id < 0:
        return ["The shipment_id cannot be negative."]
    return []


class IssueReportService:
    """
    Business logic layer for issue reports.

    Every list is ordered newest first (created_at DESC, id DESC as the
    tie-breaker for reports created within the same clock tick).
    """

    _newest_first = (IssueReport.created_at.desc(), IssueReport.id.desc())

    async def create_issue(self, db: AsyncSession, data: IssueReportCreate) -> IssueReportResponse:
        """
        Store a new issue report.

        Raises:
            ValidationError: blank or over-long title, negative shipment_id.
                Nothing is persisted in that case.
            DatabaseError: insert failed
        """
        errors: Dict[str, List[str]] = {}
        title_errors = _title_errors(data.title)
        if title_errors:
            errors["title"] = title_errors
        shipment_id_errors = _shipment_id_errors(data.shipment_id)
        if shipment_id_errors:
            errors["shipment_id"] = shipment_id_errors
        if errors:
            raise ValidationError(errors=errors)

        issue = IssueReport(
            title=data.title.strip(),
            description=_trim(data.description),
            image_url=_trim(data.image_url),
            shipment_id=data.shipment_id,
            created_at=utcnow(),
            is_important=False,
            is_fixed=False,
            resolved_at=None,
        )

        try:
            db.add(issue)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating issue report: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the issue report. Please try again later.",
                context={"error_type": type(e).__name__},
            ) from e

        logger.info("Issue report %s created (shipment_id=%s)", issue.id, issue.shipment_id)
        return IssueReportResponse.model_validate(issue)

    async def get_issue(self, db: AsyncSession, issue_id: int) -> IssueReportResponse:
        issue = await self._load(db, issue_id)
        return IssueReportResponse.model_validate(issue)

    async def list_issues(self, db: AsyncSession) -> List[IssueReportWithShipment]:
        """All issue reports, newest first, each with its shipment (or null)."""
        stmt = (
            select(IssueReport, Shipment)
            .outerjoin(Shipment, IssueReport.shipment_id == Shipment.id)
            .order_by(*self._newest_first)
        )
        rows = await self._fetch_rows(db, stmt, "listing issue reports")
        return [self._enrich(issue, shipment) for issue, shipment in rows]

    async def list_for_shipment(self, db: AsyncSession, shipment_id: int) -> List[IssueReportResponse]:
        """Reports referencing `shipment_id`; empty list when there are none."""
        try:
            result = await db.execute(
                select(IssueReport)
                .where(IssueReport.shipment_id == shipment_id)
                .order_by(*self._newest_first)
            )
            issues = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing issues for shipment %s: %s", shipment_id, str(e))
            raise DatabaseError(
                message="Could not retrieve issue reports. Please try again later.",
                context={"shipment_id": shipment_id, "error_type": type(e).__name__},
            ) from e
        return [IssueReportResponse.model_validate(i) for i in issues]

    async def list_for_assignee(self, db: AsyncSession, username: str) -> List[IssueReportWithShipment]:
        """
        "My issues": reports whose linked shipment is assigned to `username`.

        Reports without a shipment, or with a dangling shipment_id, never
        match (inner join).
        """
        stmt = (
            select(IssueReport, Shipment)
            .join(Shipment, IssueReport.shipment_id == Shipment.id)
            .where(Shipment.assigned_to == username)
            .order_by(*self._newest_first)
        )
        rows = await self._fetch_rows(db, stmt, f"listing issues assigned to {username}")
        return [self._enrich(issue, shipment) for issue, shipment in rows]

    async def update_issue(
        self,
        db: AsyncSession,
        issue_id: int,
        data: IssueReportUpdate,
    ) -> IssueReportResponse:
        """
        Apply a partial update.

        Only fields present in the request body are touched. Explicit null
        clears description, image_url and shipment_id; it is rejected for
        title, is_important and is_fixed. An explicit null resolved_at
        without is_fixed changes nothing.

        Raises:
            NotFoundError: no report with that id
            ValidationError: see above, plus the create-time title and
                shipment_id rules
            DatabaseError: update failed
        """
        issue = await self._load(db, issue_id)
        changes: Dict[str, Any] = data.model_dump(exclude_unset=True)
        self._validate_changes(changes)

        if "title" in changes:
            issue.title = changes["title"].strip()
        if "description" in changes:
            issue.description = _trim(changes["description"])
        if "image_url" in changes:
            issue.image_url = _trim(changes["image_url"])
        if "shipment_id" in changes:
            issue.shipment_id = changes["shipment_id"]
        if "is_important" in changes:
            issue.is_important = changes["is_important"]

        resolved_at = changes.get("resolved_at")
        if "is_fixed" in changes:
            issue.is_fixed = changes["is_fixed"]
            if issue.is_fixed:
                issue.resolved_at = _as_utc(resolved_at) if resolved_at else utcnow()
            else:
                issue.resolved_at = None
        elif resolved_at is not None:
            issue.resolved_at = _as_utc(resolved_at)
            issue.is_fixed = True

        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating issue report %s: %s", issue_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the issue report. Please try again later.",
                context={"issue_id": issue_id, "error_type": type(e).__name__},
            ) from e

        logger.info(
            "Issue report %s updated (fields=%s, is_fixed=%s)",
            issue_id, sorted(changes), issue.is_fixed,
        )
        return IssueReportResponse.model_validate(issue)

    # ── Helpers ───────────────────────────────────────────────────────────

    @staticmethod
    def _validate_changes(changes: Dict[str, Any]) -> None:
        errors: Dict[str, List[str]] = {}
        for field in _NON_NULLABLE_UPDATE_FIELDS:
            if field in changes and changes[field] is None:
                errors[field] = [f"The {field} field cannot be null."]
        if "title" in changes and "title" not in errors:
            title_errors = _title_errors(changes["title"])
            if title_errors:
                errors["title"] = title_errors
        shipment_id_errors = _shipment_id_errors(changes.get("shipment_id"))
        if shipment_id_errors:
            errors["shipment_id"] = shipment_id_errors
        if errors:
            raise ValidationError(errors=errors)

    @staticmethod
    def _enrich(issue: IssueReport, shipment: Optional[Shipment]) -> IssueReportWithShipment:
        enriched = IssueReportWithShipment.model_validate(issue)
        if shipment is not None:
            enriched.shipment = ShipmentResponse.model_validate(shipment)
        return enriched

    async def _load(self, db: AsyncSession, issue_id: int) -> IssueReport:
        try:
            issue = await db.get(IssueReport, issue_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching issue report %s: %s", issue_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the issue report. Please try again later.",
                context={"issue_id": issue_id},
            ) from e
        if issue is None:
            raise NotFoundError(resource="issue report", resource_id=issue_id)
        return issue

    async def _fetch_rows(self, db: AsyncSession, stmt, operation: str):
        try:
            result = await db.execute(stmt)
            return result.all()
        except SQLAlchemyError as e:
            logger.error("Database error %s: %s", operation, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve issue reports. Please try again later.",
                context={"error_type": type(e).__name__},
            ) from e


issue_report_service = IssueReportService()
