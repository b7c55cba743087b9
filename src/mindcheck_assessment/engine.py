"""AssessmentEngine — stateless, DB-backed orchestrator for assessments.

Stateless engine pattern: each call loads the session row, restores an
:class:`AssessmentSession` from it, applies at most one transition, writes
the snapshot back and returns a step model.  No in-memory state is kept
between calls.

The engine accepts an ``AsyncSession`` from the caller so that the caller
(typically a FastAPI endpoint) controls transaction boundaries.

Visibility: a session created with a user id is only visible to that user;
an anonymous session (no user id) is visible to anyone holding its id.
Results of anonymous sessions are never handed to the store.
"""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from mindcheck_db.models.session import AssessmentSessionRow
from mindcheck_db.repository import SessionRepository

from mindcheck_assessment.composer import compose_recommendation, resources_for
from mindcheck_assessment.constants import STATE_NAMES, TOTAL_QUESTIONS
from mindcheck_assessment.errors import SessionNotFound
from mindcheck_assessment.interfaces import AssessmentStore
from mindcheck_assessment.models.session import (
    CompletionStep,
    OptionPayload,
    QuestionStep,
    SessionInfo,
    StepResult,
)
from mindcheck_assessment.question_bank import QuestionBank
from mindcheck_assessment.state_machine import AssessmentSession

logger = logging.getLogger(__name__)


class AssessmentEngine:
    """Drives assessment sessions stored in ``assessment_sessions``.

    Args:
        bank: a loaded :class:`QuestionBank`
        store: persistence adapter that receives completed assessments
        repo: session repository; defaults to :class:`SessionRepository`
    """

    def __init__(
        self,
        bank: QuestionBank,
        store: AssessmentStore,
        repo: SessionRepository | None = None,
    ) -> None:
        self._bank = bank
        self._store = store
        self._repo = repo or SessionRepository()

    # ==================================================================
    # Session lifecycle
    # ==================================================================

    async def create_session(
        self,
        db: AsyncSession,
        *,
        session_id: str,
        user_id: str | None = None,
    ) -> SessionInfo:
        """Create a new session at the root question.

        Raises:
            ValueError: if ``session_id`` is already taken.
        """
        existing = await self._repo.get_by_session_id(db, session_id)
        if existing is not None:
            raise ValueError(f"Session already exists: session_id={session_id}")
        row = await self._repo.create_session(
            db, session_id=session_id, user_id=user_id, current_qid=self._bank.root_qid,
        )
        logger.info("Created assessment session %s (user=%s)", session_id, user_id)
        return self._to_session_info(row)

    async def get_session(
        self, db: AsyncSession, *, session_id: str, user_id: str | None = None
    ) -> SessionInfo | None:
        """Fetch session info.  Returns None if not found or not visible."""
        row = await self._repo.get_by_session_id(db, session_id)
        if row is None or not self._visible(row, user_id):
            return None
        return self._to_session_info(row)

    async def list_sessions(
        self,
        db: AsyncSession,
        *,
        user_id: str,
        limit: int = 20,
        offset: int = 0,
    ) -> list[SessionInfo]:
        """List a user's sessions, most recent first."""
        rows = await self._repo.list_by_user(db, user_id, limit=limit, offset=offset)
        return [self._to_session_info(r) for r in rows]

    # ==================================================================
    # Step API
    # ==================================================================

    async def get_current_step(
        self, db: AsyncSession, *, session_id: str, user_id: str | None = None
    ) -> StepResult:
        """Return the current question or the completion result.  Read-only."""
        row = await self._load_session(db, session_id, user_id)
        return self._compute_step(row, self._restore(row))

    async def submit_answer(
        self,
        db: AsyncSession,
        *,
        session_id: str,
        option_index: int,
        user_id: str | None = None,
    ) -> StepResult:
        """Answer the current question and advance the session.

        On the transition to ``complete`` the result is classified and, when
        the session has a user identity, handed to the store.  A store
        failure is recorded in the session's submission-error slot and the
        completion step is still returned.

        Raises:
            SessionNotFound: unknown or invisible session.
            InvalidOption: index outside the current question's options;
                nothing is written.
            InvalidState: the session is already complete.
        """
        row = await self._load_session(db, session_id, user_id, for_update=True)
        session = self._restore(row)
        session.answer(option_index)

        assessment_id = None
        if session.is_complete:
            record = await session.finalize(self._store, db, user_id=row.user_id)
            if record is not None:
                assessment_id = record.id
                logger.info(
                    "Assessment %s saved for user %s (%s, score %d)",
                    record.id, record.user_id, record.severity_level, record.score,
                )

        await self._repo.save_snapshot(
            db, row, session.snapshot(), assessment_id=assessment_id,
        )
        return self._compute_step(row, session)

    async def reset_session(
        self, db: AsyncSession, *, session_id: str, user_id: str | None = None
    ) -> StepResult:
        """Restart the session at the root question.  Valid from any state."""
        row = await self._load_session(db, session_id, user_id, for_update=True)
        session = self._restore(row)
        session.reset()
        await self._repo.save_snapshot(db, row, session.snapshot())
        logger.debug("Session %s reset", session_id)
        return self._compute_step(row, session)

    async def dismiss_error(
        self, db: AsyncSession, *, session_id: str, user_id: str | None = None
    ) -> SessionInfo:
        """Clear the submission-error slot once the user has seen it."""
        row = await self._load_session(db, session_id, user_id, for_update=True)
        session = self._restore(row)
        session.dismiss_error()
        await self._repo.save_snapshot(db, row, session.snapshot())
        return self._to_session_info(row)

    # ==================================================================
    # Internal helpers
    # ==================================================================

    @staticmethod
    def _visible(row: AssessmentSessionRow, user_id: str | None) -> bool:
        return row.user_id is None or row.user_id == user_id

    async def _load_session(
        self,
        db: AsyncSession,
        session_id: str,
        user_id: str | None,
        *,
        for_update: bool = False,
    ) -> AssessmentSessionRow:
        row = await self._repo.get_by_session_id(db, session_id, for_update=for_update)
        if row is None or not self._visible(row, user_id):
            raise SessionNotFound(f"Session not found: session_id={session_id}")
        return row

    def _restore(self, row: AssessmentSessionRow) -> AssessmentSession:
        return AssessmentSession.restore(
            self._bank,
            {
                "state": row.state,
                "current_qid": row.current_qid,
                "answers": row.answers,
                "pending": row.pending,
                "primary_concern": row.primary_concern,
                "submission_error": row.submission_error,
            },
        )

    def _compute_step(
        self, row: AssessmentSessionRow, session: AssessmentSession
    ) -> StepResult:
        if session.is_complete:
            return self._build_completion_step(row, session)

        question = session.current_question
        return QuestionStep(
            state=session.state.value,
            state_name=STATE_NAMES[session.state.value],
            qid=question.qid,
            question=question.question,
            options=[
                OptionPayload(index=i, label=label)
                for i, label in enumerate(question.options)
            ],
            category=question.category,
            question_number=session.question_number,
            total_questions=TOTAL_QUESTIONS,
            progress=session.progress,
        )

    @staticmethod
    def _build_completion_step(
        row: AssessmentSessionRow, session: AssessmentSession
    ) -> CompletionStep:
        severity = session.severity()
        return CompletionStep(
            severity=severity,
            primary_concern=session.primary_concern,
            recommendations=compose_recommendation(severity.level, session.primary_concern),
            resources=resources_for(severity.level),
            saved=row.assessment_id is not None,
            submission_error=session.submission_error,
        )

    def _to_session_info(self, row: AssessmentSessionRow) -> SessionInfo:
        """Convert an ORM row to a public SessionInfo."""
        session = self._restore(row)
        return SessionInfo(
            session_id=row.session_id,
            user_id=row.user_id,
            state=session.state.value,
            current_qid=row.current_qid,
            primary_concern=row.primary_concern,
            progress=session.progress,
            submission_error=row.submission_error,
            created_at=row.created_at,
            updated_at=row.updated_at,
            completed_at=row.completed_at,
        )
