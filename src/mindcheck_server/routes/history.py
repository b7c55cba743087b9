"""Assessment history endpoint — the current user's stored results."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mindcheck_assessment.interfaces import AssessmentStore
from mindcheck_assessment.models.result import AssessmentRecord

from mindcheck_server.dependencies import get_db, get_store, get_user_id

router = APIRouter(tags=["history"])


@router.get("/assessments")
async def list_assessments(
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    store: AssessmentStore = Depends(get_store),
) -> list[AssessmentRecord]:
    """All stored assessments for the current user, oldest first."""
    return await store.query_assessments(db, user_id)
