"""Progress endpoint — mood timeline, distributions and streak.

Reading progress also logs today's entry from the latest assessment when
one is missing, so the timeline fills in as the user checks in.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mindcheck_assessment.progress import ProgressFeed, ProgressSnapshot

from mindcheck_server.dependencies import get_db, get_feed, get_user_id

router = APIRouter(tags=["progress"])


@router.get("/progress")
async def get_progress(
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    feed: ProgressFeed = Depends(get_feed),
) -> ProgressSnapshot:
    return await feed.refresh(db, user_id)
