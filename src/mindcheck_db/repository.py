"""Async CRUD repositories for the mindcheck tables.

All public methods accept an ``AsyncSession`` so the caller controls
transaction boundaries.  Methods only ``flush()``; committing is the job of
the request dependency (or the CLI) that opened the session.

The repositories avoid business-logic validation; that belongs in the SDK
layer.  Structural invariants (score ranges, state values) are enforced by
DB constraints.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from mindcheck_db.models.assessment import AssessmentRow
from mindcheck_db.models.counselor import CounselorProfileRow
from mindcheck_db.models.enums import SessionState
from mindcheck_db.models.progress import ProgressRow
from mindcheck_db.models.session import AssessmentSessionRow


class SessionRepository:
    """Async read/write operations on the ``assessment_sessions`` table."""

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    async def create_session(
        self,
        db: AsyncSession,
        *,
        session_id: str,
        user_id: str | None,
        current_qid: str,
    ) -> AssessmentSessionRow:
        """Insert a new session row at the root question and return it."""
        row = AssessmentSessionRow(
            session_id=session_id,
            user_id=user_id,
            state=SessionState.AWAITING_ROOT.value,
            current_qid=current_qid,
            answers={},
            pending=[],
        )
        db.add(row)
        await db.flush()  # Populate defaults (id, timestamps)
        return row

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def get_by_session_id(
        self, db: AsyncSession, session_id: str, *, for_update: bool = False
    ) -> AssessmentSessionRow | None:
        """Fetch a session by its caller-supplied identifier.

        ``for_update=True`` takes a row lock until the caller's transaction
        ends, serialising concurrent answers to the same session.
        """
        stmt = select(AssessmentSessionRow).where(
            AssessmentSessionRow.session_id == session_id
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_user(
        self,
        db: AsyncSession,
        user_id: str,
        *,
        limit: int = 20,
        offset: int = 0,
    ) -> list[AssessmentSessionRow]:
        """List sessions for a user, most recent first."""
        stmt = (
            select(AssessmentSessionRow)
            .where(AssessmentSessionRow.user_id == user_id)
            .order_by(AssessmentSessionRow.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    async def save_snapshot(
        self,
        db: AsyncSession,
        row: AssessmentSessionRow,
        snapshot: dict[str, Any],
        *,
        assessment_id: str | None = None,
    ) -> AssessmentSessionRow:
        """Overwrite the state-machine columns from a session snapshot.

        ``completed_at`` is stamped on the first transition to ``complete``.
        Leaving ``complete`` (a reset) clears it together with the stored
        ``assessment_id``.
        """
        now = datetime.now(timezone.utc)
        state = snapshot["state"]
        row.state = state
        row.current_qid = snapshot["current_qid"]
        # New containers so SQLAlchemy detects the JSONB mutation
        row.answers = dict(snapshot["answers"])
        row.pending = list(snapshot["pending"])
        row.primary_concern = snapshot["primary_concern"]
        row.submission_error = snapshot["submission_error"]
        if state == SessionState.COMPLETE.value:
            if row.completed_at is None:
                row.completed_at = now
            if assessment_id is not None:
                row.assessment_id = assessment_id
        else:
            row.completed_at = None
            row.assessment_id = None
        row.updated_at = now
        await db.flush()
        return row

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    async def delete_stale(
        self,
        db: AsyncSession,
        *,
        older_than: datetime,
        include_complete: bool = False,
    ) -> int:
        """Delete sessions not updated since ``older_than``.

        Only incomplete sessions are removed unless ``include_complete``.
        Returns the number of rows deleted.
        """
        stmt = delete(AssessmentSessionRow).where(
            AssessmentSessionRow.updated_at < older_than
        )
        if not include_complete:
            stmt = stmt.where(AssessmentSessionRow.state != SessionState.COMPLETE.value)
        result = await db.execute(stmt)
        await db.flush()
        return result.rowcount or 0


class AssessmentRepository:
    """Async read/write operations on the ``assessments`` table."""

    async def insert(
        self,
        db: AsyncSession,
        *,
        user_id: str,
        assessment_date: datetime,
        severity_level: str,
        score: int,
        recommendations: str,
    ) -> AssessmentRow:
        row = AssessmentRow(
            user_id=user_id,
            assessment_date=assessment_date,
            severity_level=severity_level,
            score=score,
            recommendations=recommendations,
        )
        db.add(row)
        await db.flush()
        return row

    async def list_by_user(self, db: AsyncSession, user_id: str) -> list[AssessmentRow]:
        """All assessments for a user, oldest first."""
        stmt = (
            select(AssessmentRow)
            .where(AssessmentRow.user_id == user_id)
            .order_by(AssessmentRow.assessment_date.asc())
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())


class ProgressRepository:
    """Async read/write operations on the ``progress_tracking`` table."""

    async def insert(
        self,
        db: AsyncSession,
        *,
        user_id: str,
        date: datetime,
        mood_score: int,
        activities: list[str],
    ) -> ProgressRow:
        row = ProgressRow(
            user_id=user_id,
            date=date,
            mood_score=mood_score,
            activities=list(activities),
        )
        db.add(row)
        await db.flush()
        return row

    async def list_by_user(self, db: AsyncSession, user_id: str) -> list[ProgressRow]:
        """All progress entries for a user, oldest first."""
        stmt = (
            select(ProgressRow)
            .where(ProgressRow.user_id == user_id)
            .order_by(ProgressRow.date.asc())
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())


class CounselorRepository:
    """Async write operations on the ``counselor_profiles`` table."""

    async def create_profile(
        self, db: AsyncSession, *, user_id: str, **fields: Any
    ) -> CounselorProfileRow:
        row = CounselorProfileRow(user_id=user_id, **fields)
        db.add(row)
        await db.flush()
        return row
