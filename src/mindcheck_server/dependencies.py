"""FastAPI dependency injection — DB sessions, shared services, user identity.

Each request that touches the database gets a fresh ``AsyncSession`` via
``get_db()``.  The session is committed on success and rolled back on error,
matching the SDK convention where engine/repository call ``flush()`` but
never ``commit()``.

Shared services are built once in the lifespan handler and stashed on
``app.state``; the getters below hand them to routes.
"""

import hmac
from typing import AsyncGenerator

from fastapi import Header, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from mindcheck_assessment.chat import ChatResponder
from mindcheck_assessment.engine import AssessmentEngine
from mindcheck_assessment.interfaces import AssessmentStore, SchedulingService
from mindcheck_assessment.persistence import discard_pending_events, publish_pending_events
from mindcheck_assessment.progress import ProgressFeed
from mindcheck_assessment.question_bank import QuestionBank
from mindcheck_assessment.summary import SummaryRenderer
from mindcheck_db.repository import CounselorRepository


# ------------------------------------------------------------------
# Database session — transaction boundary lives here
# ------------------------------------------------------------------

async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async DB session; commit on success, rollback on error.

    Change events queued by the store during the request are delivered only
    after the commit succeeds.
    """
    database = request.app.state.database
    async with database.session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            discard_pending_events(session)
            await session.rollback()
            raise
        publish_pending_events(session)


# ------------------------------------------------------------------
# Shared services — stashed on app.state during lifespan
# ------------------------------------------------------------------

def get_engine(request: Request) -> AssessmentEngine:
    return request.app.state.engine


def get_bank(request: Request) -> QuestionBank:
    return request.app.state.bank


def get_store(request: Request) -> AssessmentStore:
    return request.app.state.store


def get_feed(request: Request) -> ProgressFeed:
    return request.app.state.feed


def get_chat(request: Request) -> ChatResponder:
    return request.app.state.chat


def get_renderer(request: Request) -> SummaryRenderer:
    return request.app.state.renderer


def get_scheduler(request: Request) -> SchedulingService:
    return request.app.state.scheduler


def get_counselor_repo(request: Request) -> CounselorRepository:
    return request.app.state.counselor_repo


# ------------------------------------------------------------------
# User identity — extracted from the X-User-ID header
# ------------------------------------------------------------------

def _check_proxy_secret(request: Request, x_proxy_secret: str | None) -> None:
    """Require a matching ``X-Proxy-Secret`` when ``TRUSTED_PROXY_SECRET`` is set.

    This proves the ``X-User-ID`` was injected by a trusted API gateway
    and not forged by an external client.
    """
    expected_secret: str | None = request.app.state.settings.trusted_proxy_secret
    if not expected_secret:
        return
    if not x_proxy_secret:
        raise HTTPException(status_code=403, detail="X-Proxy-Secret header is required")
    # Constant-time comparison to prevent timing side-channels.
    if not hmac.compare_digest(x_proxy_secret, expected_secret):
        raise HTTPException(status_code=403, detail="Invalid proxy secret")


async def get_optional_user_id(
    request: Request,
    x_user_id: str | None = Header(None, alias="X-User-ID"),
    x_proxy_secret: str | None = Header(None, alias="X-Proxy-Secret"),
) -> str | None:
    """Current user, or None for anonymous callers.

    Assessment sessions work anonymously; their results are simply not
    stored.
    """
    if not x_user_id:
        return None
    _check_proxy_secret(request, x_proxy_secret)
    return x_user_id


async def get_user_id(
    request: Request,
    x_user_id: str | None = Header(None, alias="X-User-ID"),
    x_proxy_secret: str | None = Header(None, alias="X-Proxy-Secret"),
) -> str:
    """Current user; 401 if the ``X-User-ID`` header is missing."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="X-User-ID header is required")
    _check_proxy_secret(request, x_proxy_secret)
    return x_user_id
