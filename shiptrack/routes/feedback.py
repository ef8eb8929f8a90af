"""
ShipTrack Backend: App Feedback Routes
=======================================
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from shiptrack.database import get_db_session
from shiptrack.schemas.common import ErrorResponse
from shiptrack.schemas.feedback import AppFeedbackCreate, AppFeedbackResponse
from shiptrack.services.feedback_service import feedback_service

router = APIRouter(prefix="/api", tags=["App Feedback"])


@router.post(
    "/app-feedback",
    response_model=AppFeedbackResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
    summary="Submit app feedback",
)
async def submit_feedback(
    payload: AppFeedbackCreate,
    db: AsyncSession = Depends(get_db_session),
) -> AppFeedbackResponse:
    return await feedback_service.submit_feedback(db, payload)


@router.get(
    "/app-feedback",
    response_model=List[AppFeedbackResponse],
    summary="List app feedback (newest first)",
)
async def list_feedback(db: AsyncSession = Depends(get_db_session)) -> List[AppFeedbackResponse]:
    return await feedback_service.list_feedback(db)
