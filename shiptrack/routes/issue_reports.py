"""
ShipTrack Backend: Issue Report Route Handlers
===============================================

What:  /api/issue-reports endpoints. The driver app submits reports and
       lists "my issues"; the dashboard lists, triages (is_important) and
       resolves (is_fixed) them.
"""

from typing import List

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from shiptrack.database import get_db_session
from shiptrack.schemas.common import ErrorResponse
from shiptrack.schemas.issue_report import (
    IssueReportCreate,
    IssueReportResponse,
    IssueReportUpdate,
    IssueReportWithShipment,
)
from shiptrack.services.issue_report_service import issue_report_service


router = APIRouter(prefix="/api", tags=["Issue Reports"])


@router.get(
    "/issue-reports",
    response_model=List[IssueReportWithShipment],
    summary="List all issue reports (newest first) with their shipment",
)
async def list_issue_reports(
    db: AsyncSession = Depends(get_db_session),
) -> List[IssueReportWithShipment]:
    return await issue_report_service.list_issues(db)


@router.post(
    "/issue-reports",
    response_model=IssueReportResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
    summary="Submit an issue report",
)
async def create_issue_report(
    payload: IssueReportCreate,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> IssueReportResponse:
    """
    Stores a report. shipment_id is not checked against existing shipments;
    reports for unknown ids are accepted.
    """
    created = await issue_report_service.create_issue(db, payload)
    response.headers["Location"] = str(request.url_for("get_issue_report", issue_id=created.id))
    return created


@router.get(
    "/issue-reports/shipment/{shipment_id}",
    response_model=List[IssueReportResponse],
    summary="Issue reports for one shipment",
)
async def list_issue_reports_for_shipment(
    shipment_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> List[IssueReportResponse]:
    return await issue_report_service.list_for_shipment(db, shipment_id)


@router.get(
    "/issue-reports/assigned-to/{username}",
    response_model=List[IssueReportWithShipment],
    summary="Issue reports on shipments assigned to a user",
)
async def list_issue_reports_for_assignee(
    username: str,
    db: AsyncSession = Depends(get_db_session),
) -> List[IssueReportWithShipment]:
    return await issue_report_service.list_for_assignee(db, username)


@router.get(
    "/issue-reports/{issue_id}",
    response_model=IssueReportResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get a single issue report",
)
async def get_issue_report(
    issue_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> IssueReportResponse:
    return await issue_report_service.get_issue(db, issue_id)


@router.api_route(
    "/issue-reports/{issue_id}",
    methods=["PUT", "PATCH"],
    response_model=IssueReportResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Partially update an issue report",
)
async def update_issue_report(
    issue_id: int,
    payload: IssueReportUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> IssueReportResponse:
    """
    Fields omitted from the body are left unchanged. Both PUT (mobile app,
    dashboard) and PATCH are accepted with the same partial semantics.
    """
    return await issue_report_service.update_issue(db, issue_id, payload)
