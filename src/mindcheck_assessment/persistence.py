"""DatabaseAssessmentStore — the PostgreSQL-backed persistence adapter.

Wraps the ``mindcheck_db`` repositories behind the
:class:`~mindcheck_assessment.interfaces.AssessmentStore` contract:

  - driver errors (``SQLAlchemyError``) become ``PersistenceFailure``
  - a successful insert queues a change event for the owning user on the
    session; :func:`publish_pending_events` delivers the queue once the
    caller has committed, :func:`discard_pending_events` drops it on rollback
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from mindcheck_db.models.assessment import AssessmentRow
from mindcheck_db.models.progress import ProgressRow
from mindcheck_db.repository import AssessmentRepository, ProgressRepository

from mindcheck_assessment.constants import ASSESSMENTS_TABLE, PROGRESS_TABLE
from mindcheck_assessment.errors import PersistenceFailure
from mindcheck_assessment.interfaces import AssessmentStore, ChangeEvent, ChangeNotifier
from mindcheck_assessment.models.result import AssessmentRecord, ProgressEntry

logger = logging.getLogger(__name__)

# AsyncSession.info key holding [(notifier, event), ...] awaiting commit
PENDING_EVENTS_KEY = "mindcheck.pending_events"


def publish_pending_events(db: AsyncSession) -> int:
    """Deliver the change events queued on ``db``.  Call after commit."""
    pending = db.info.pop(PENDING_EVENTS_KEY, [])
    for notifier, event in pending:
        notifier.publish(event)
    return len(pending)


def discard_pending_events(db: AsyncSession) -> None:
    """Forget queued events; their rows were rolled back."""
    dropped = db.info.pop(PENDING_EVENTS_KEY, [])
    if dropped:
        logger.debug("Discarded %d change event(s) on rollback", len(dropped))


def _record_from_row(row: AssessmentRow) -> AssessmentRecord:
    return AssessmentRecord(
        id=str(row.id),
        user_id=row.user_id,
        assessment_date=row.assessment_date,
        severity_level=row.severity_level,
        score=row.score,
        recommendations=row.recommendations,
    )


def _entry_from_row(row: ProgressRow) -> ProgressEntry:
    return ProgressEntry(
        id=str(row.id),
        user_id=row.user_id,
        date=row.date,
        mood_score=row.mood_score,
        activities=list(row.activities or []),
    )


class DatabaseAssessmentStore(AssessmentStore):
    """Stores assessments and progress entries via the async repositories.

    Args:
        notifier: optional change notifier told about every committed insert
    """

    def __init__(
        self,
        notifier: ChangeNotifier | None = None,
        *,
        assessments: AssessmentRepository | None = None,
        progress: ProgressRepository | None = None,
    ) -> None:
        self._notifier = notifier
        self._assessments = assessments or AssessmentRepository()
        self._progress = progress or ProgressRepository()

    def _queue(self, db: AsyncSession, table: str, user_id: str, record: dict) -> None:
        if self._notifier is None:
            return
        event = ChangeEvent(table=table, user_id=user_id, record=record)
        db.info.setdefault(PENDING_EVENTS_KEY, []).append((self._notifier, event))

    # ------------------------------------------------------------------
    # Assessments
    # ------------------------------------------------------------------

    async def insert_assessment(
        self, db: AsyncSession, record: AssessmentRecord
    ) -> AssessmentRecord:
        try:
            # savepoint: a failed insert must not poison the caller's transaction
            async with db.begin_nested():
                row = await self._assessments.insert(
                    db,
                    user_id=record.user_id,
                    assessment_date=record.assessment_date,
                    severity_level=record.severity_level,
                    score=record.score,
                    recommendations=record.recommendations,
                )
        except SQLAlchemyError as exc:
            logger.warning("Assessment insert failed for user %s: %s", record.user_id, exc)
            raise PersistenceFailure("Could not save your assessment. Please try again.") from exc

        saved = _record_from_row(row)
        self._queue(db, ASSESSMENTS_TABLE, saved.user_id, saved.model_dump(mode="json"))
        return saved

    async def query_assessments(self, db: AsyncSession, user_id: str) -> list[AssessmentRecord]:
        try:
            rows = await self._assessments.list_by_user(db, user_id)
        except SQLAlchemyError as exc:
            logger.warning("Assessment query failed for user %s: %s", user_id, exc)
            raise PersistenceFailure("Could not load assessments") from exc
        return [_record_from_row(r) for r in rows]

    # ------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------

    async def insert_progress(self, db: AsyncSession, entry: ProgressEntry) -> ProgressEntry:
        try:
            async with db.begin_nested():
                row = await self._progress.insert(
                    db,
                    user_id=entry.user_id,
                    date=entry.date,
                    mood_score=entry.mood_score,
                    activities=entry.activities,
                )
        except SQLAlchemyError as exc:
            logger.warning("Progress insert failed for user %s: %s", entry.user_id, exc)
            raise PersistenceFailure("Could not save progress entry") from exc

        saved = _entry_from_row(row)
        self._queue(db, PROGRESS_TABLE, saved.user_id, saved.model_dump(mode="json"))
        return saved

    async def query_progress(self, db: AsyncSession, user_id: str) -> list[ProgressEntry]:
        try:
            rows = await self._progress.list_by_user(db, user_id)
        except SQLAlchemyError as exc:
            logger.warning("Progress query failed for user %s: %s", user_id, exc)
            raise PersistenceFailure("Could not load progress entries") from exc
        return [_entry_from_row(r) for r in rows]
