"""Counselor endpoints — directory, enrollment and session booking.

Booking goes through the configured :class:`SchedulingService`; a remote
failure comes back as ``{"success": false, "error": ...}`` with status 200
so the client can show the message inline.
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from mindcheck_assessment.interfaces import SchedulingService
from mindcheck_assessment.models.scheduling import (
    Counselor,
    CounselorEnrollment,
    ScheduleRequest,
    ScheduleResult,
)
from mindcheck_assessment.scheduling import COUNSELORS, find_counselor
from mindcheck_db.repository import CounselorRepository

from mindcheck_server.dependencies import (
    get_counselor_repo,
    get_db,
    get_scheduler,
    get_user_id,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/counselors", tags=["counselors"])


# ------------------------------------------------------------------
# Request models
# ------------------------------------------------------------------

class BookSessionRequest(BaseModel):
    """Body for POST /counselors/sessions."""
    counselor_email: str
    patient_name: str = Field(min_length=1)
    patient_email: str = Field(min_length=3)
    date_time: datetime


class EnrollmentResponse(BaseModel):
    id: str
    full_name: str
    specialization: list[str]


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.get("")
async def list_counselors() -> list[Counselor]:
    return list(COUNSELORS)


@router.post("/enrollments", status_code=201)
async def enroll_counselor(
    body: CounselorEnrollment,
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    repo: CounselorRepository = Depends(get_counselor_repo),
) -> EnrollmentResponse:
    """Submit a counselor profile for the current user."""
    row = await repo.create_profile(db, user_id=user_id, **body.model_dump())
    logger.info("Counselor enrollment %s created for user %s", row.id, user_id)
    return EnrollmentResponse(
        id=str(row.id), full_name=row.full_name, specialization=list(row.specialization),
    )


@router.post("/sessions")
async def book_session(
    body: BookSessionRequest,
    user_id: str = Depends(get_user_id),
    scheduler: SchedulingService = Depends(get_scheduler),
) -> ScheduleResult:
    """Book a one-hour video session with a listed counselor.

    404 for an unknown counselor, 400 for a time in the past.
    """
    counselor = find_counselor(body.counselor_email)
    if counselor is None:
        raise ValueError(f"Counselor not found: {body.counselor_email}")

    request = ScheduleRequest(
        counselor_name=counselor.name,
        counselor_email=counselor.email,
        patient_name=body.patient_name,
        patient_email=body.patient_email,
        date_time=body.date_time,
    )
    result = await scheduler.schedule(request)
    if result.success:
        logger.info("User %s booked %s (event %s)", user_id, counselor.email, result.event_id)
    else:
        logger.warning("Booking for user %s failed: %s", user_id, result.error)
    return result
