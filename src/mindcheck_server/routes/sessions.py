"""Session management endpoints — create, get, list, reset sessions.

``X-User-ID`` is optional except for listing.  A session created without it
is anonymous: anyone holding the session id can drive it, and its result is
never stored.
"""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from mindcheck_assessment.engine import AssessmentEngine
from mindcheck_assessment.errors import SessionNotFound
from mindcheck_assessment.models.session import SessionInfo, StepResult

from mindcheck_server.config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from mindcheck_server.dependencies import (
    get_db,
    get_engine,
    get_optional_user_id,
    get_user_id,
)

router = APIRouter(prefix="/assessments", tags=["sessions"])


# ------------------------------------------------------------------
# Request models
# ------------------------------------------------------------------

class CreateSessionRequest(BaseModel):
    """Body for POST /assessments/sessions."""
    session_id: str = Field(min_length=1, max_length=128)


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.post("/sessions", status_code=201)
async def create_session(
    body: CreateSessionRequest,
    user_id: str | None = Depends(get_optional_user_id),
    db: AsyncSession = Depends(get_db),
    engine: AssessmentEngine = Depends(get_engine),
) -> SessionInfo:
    """Start a new assessment at the root question.

    Returns 201 on success, 409 if the session id is already taken.
    """
    return await engine.create_session(db, session_id=body.session_id, user_id=user_id)


@router.get("/sessions")
async def list_sessions(
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    engine: AssessmentEngine = Depends(get_engine),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    offset: int = Query(0, ge=0),
) -> list[SessionInfo]:
    """List sessions for the current user, most recent first."""
    return await engine.list_sessions(db, user_id=user_id, limit=limit, offset=offset)


@router.get("/sessions/{session_id}")
async def get_session(
    session_id: str,
    user_id: str | None = Depends(get_optional_user_id),
    db: AsyncSession = Depends(get_db),
    engine: AssessmentEngine = Depends(get_engine),
) -> SessionInfo:
    """Get session info.  404 if the session does not exist for this caller."""
    info = await engine.get_session(db, session_id=session_id, user_id=user_id)
    if info is None:
        raise SessionNotFound(f"Session not found: session_id={session_id}")
    return info


@router.post("/sessions/{session_id}/reset")
async def reset_session(
    session_id: str,
    user_id: str | None = Depends(get_optional_user_id),
    db: AsyncSession = Depends(get_db),
    engine: AssessmentEngine = Depends(get_engine),
) -> StepResult:
    """Discard all answers and return to the root question."""
    return await engine.reset_session(db, session_id=session_id, user_id=user_id)


@router.delete("/sessions/{session_id}/error")
async def dismiss_error(
    session_id: str,
    user_id: str | None = Depends(get_optional_user_id),
    db: AsyncSession = Depends(get_db),
    engine: AssessmentEngine = Depends(get_engine),
) -> SessionInfo:
    """Clear the submission error shown after a failed save."""
    return await engine.dismiss_error(db, session_id=session_id, user_id=user_id)
