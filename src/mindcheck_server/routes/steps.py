"""Step endpoints — current question, answer submission, text summary.

A step is either a ``question`` (one question with its options and the
progress so far) or ``complete`` (severity, primary concern,
recommendations and resources).
"""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from mindcheck_assessment.engine import AssessmentEngine
from mindcheck_assessment.models.session import StepResult
from mindcheck_assessment.summary import SummaryRenderer

from mindcheck_server.dependencies import (
    get_db,
    get_engine,
    get_optional_user_id,
    get_renderer,
)

router = APIRouter(prefix="/assessments", tags=["steps"])


class SubmitAnswerRequest(BaseModel):
    """Body for POST /assessments/sessions/{session_id}/step."""
    option_index: int


@router.get("/sessions/{session_id}/step")
async def get_current_step(
    session_id: str,
    user_id: str | None = Depends(get_optional_user_id),
    db: AsyncSession = Depends(get_db),
    engine: AssessmentEngine = Depends(get_engine),
) -> StepResult:
    """Return the current question, or the result once complete."""
    return await engine.get_current_step(db, session_id=session_id, user_id=user_id)


@router.post("/sessions/{session_id}/step")
async def submit_answer(
    session_id: str,
    body: SubmitAnswerRequest,
    user_id: str | None = Depends(get_optional_user_id),
    db: AsyncSession = Depends(get_db),
    engine: AssessmentEngine = Depends(get_engine),
) -> StepResult:
    """Answer the current question and advance.

    422 for an out-of-range option, 409 once the assessment is complete.
    """
    return await engine.submit_answer(
        db,
        session_id=session_id,
        option_index=body.option_index,
        user_id=user_id,
    )


@router.get("/sessions/{session_id}/summary", response_class=PlainTextResponse)
async def get_summary(
    session_id: str,
    user_id: str | None = Depends(get_optional_user_id),
    db: AsyncSession = Depends(get_db),
    engine: AssessmentEngine = Depends(get_engine),
    renderer: SummaryRenderer = Depends(get_renderer),
) -> str:
    """Plain-text rendering of the current step."""
    step = await engine.get_current_step(db, session_id=session_id, user_id=user_id)
    return renderer.render_step(step)
