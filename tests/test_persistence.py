"""DatabaseAssessmentStore and SessionRepository with a mocked AsyncSession.

The repositories are replaced by AsyncMocks so no database is needed; the
session ``db`` is a MagicMock whose ``begin_nested()`` works as an async
context manager.  Snapshot bookkeeping is checked on a real ORM row object
that is never attached to a session.
"""

import uuid
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from mindcheck_assessment.constants import ASSESSMENTS_TABLE, PROGRESS_TABLE
from mindcheck_assessment.errors import PersistenceFailure
from mindcheck_assessment.models.result import AssessmentRecord, ProgressEntry
from mindcheck_assessment.notifications import InMemoryChangeNotifier
from mindcheck_assessment.persistence import (
    DatabaseAssessmentStore,
    discard_pending_events,
    publish_pending_events,
)
from mindcheck_db.models.session import AssessmentSessionRow
from mindcheck_db.repository import SessionRepository
from mindcheck_server.dependencies import get_db

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def _assessment_row(**overrides):
    fields = {
        "id": uuid.uuid4(),
        "user_id": "u1",
        "assessment_date": NOW,
        "severity_level": "mild",
        "score": 10,
        "recommendations": "text",
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


def _record():
    return AssessmentRecord(
        user_id="u1",
        assessment_date=NOW,
        severity_level="mild",
        score=10,
        recommendations="text",
    )


@pytest.fixture
def mock_db():
    db = MagicMock()
    db.info = {}
    return db


@pytest.fixture
def notifier():
    return InMemoryChangeNotifier()


class TestDatabaseAssessmentStore:

    @pytest.mark.asyncio
    async def test_insert_assessment_publishes_after_commit(self, mock_db, notifier):
        row = _assessment_row()
        repo = MagicMock()
        repo.insert = AsyncMock(return_value=row)
        events = []
        notifier.subscribe(ASSESSMENTS_TABLE, "u1", events.append)

        store = DatabaseAssessmentStore(notifier, assessments=repo)
        saved = await store.insert_assessment(mock_db, _record())

        assert saved.id == str(row.id)
        assert saved.score == 10
        mock_db.begin_nested.assert_called_once()
        repo.insert.assert_awaited_once()
        assert events == []

        assert publish_pending_events(mock_db) == 1
        assert len(events) == 1
        assert events[0].table == ASSESSMENTS_TABLE
        assert events[0].event_type == "INSERT"
        assert events[0].record["id"] == str(row.id)

    @pytest.mark.asyncio
    async def test_insert_failure_becomes_persistence_failure(self, mock_db, notifier):
        repo = MagicMock()
        repo.insert = AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("down")))
        events = []
        notifier.subscribe(ASSESSMENTS_TABLE, "u1", events.append)

        store = DatabaseAssessmentStore(notifier, assessments=repo)
        with pytest.raises(PersistenceFailure) as exc_info:
            await store.insert_assessment(mock_db, _record())
        assert str(exc_info.value) == "Could not save your assessment. Please try again."
        assert events == []
        assert publish_pending_events(mock_db) == 0

    @pytest.mark.asyncio
    async def test_query_assessments_converts_rows(self, mock_db):
        rows = [_assessment_row(score=3, severity_level="minor"), _assessment_row(score=15)]
        repo = MagicMock()
        repo.list_by_user = AsyncMock(return_value=rows)

        store = DatabaseAssessmentStore(assessments=repo)
        records = await store.query_assessments(mock_db, "u1")
        assert [r.score for r in records] == [3, 15]
        assert all(isinstance(r.id, str) for r in records)

    @pytest.mark.asyncio
    async def test_query_failure(self, mock_db):
        repo = MagicMock()
        repo.list_by_user = AsyncMock(side_effect=SQLAlchemyError("gone"))
        with pytest.raises(PersistenceFailure):
            await DatabaseAssessmentStore(assessments=repo).query_assessments(mock_db, "u1")

    @pytest.mark.asyncio
    async def test_insert_progress_publishes(self, mock_db, notifier):
        row = SimpleNamespace(
            id=uuid.uuid4(), user_id="u1", date=NOW, mood_score=5, activities=["meditation"],
        )
        repo = MagicMock()
        repo.insert = AsyncMock(return_value=row)
        events = []
        notifier.subscribe(PROGRESS_TABLE, "u1", events.append)

        store = DatabaseAssessmentStore(notifier, progress=repo)
        entry = ProgressEntry(user_id="u1", date=NOW, mood_score=5, activities=["meditation"])
        saved = await store.insert_progress(mock_db, entry)
        assert saved.id == str(row.id)
        assert saved.activities == ["meditation"]
        publish_pending_events(mock_db)
        assert [e.table for e in events] == [PROGRESS_TABLE]


def _request_for(db):
    database = MagicMock()
    database.session.return_value.__aenter__.return_value = db
    return SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace(database=database)))


def _progress_store(notifier):
    row = SimpleNamespace(
        id=uuid.uuid4(), user_id="u1", date=NOW, mood_score=5, activities=["meditation"],
    )
    repo = MagicMock()
    repo.insert = AsyncMock(return_value=row)
    return DatabaseAssessmentStore(notifier, progress=repo)


class TestRequestTransaction:
    """get_db delivers queued change events only once the commit succeeded."""

    @pytest.mark.asyncio
    async def test_events_published_after_commit(self, mock_db, notifier):
        mock_db.commit = AsyncMock()
        mock_db.rollback = AsyncMock()
        events = []
        notifier.subscribe(PROGRESS_TABLE, "u1", events.append)
        store = _progress_store(notifier)
        entry = ProgressEntry(user_id="u1", date=NOW, mood_score=5, activities=["meditation"])

        gen = get_db(_request_for(mock_db))
        db = await gen.__anext__()
        await store.insert_progress(db, entry)
        assert events == []

        with pytest.raises(StopAsyncIteration):
            await gen.__anext__()
        mock_db.commit.assert_awaited_once()
        assert [e.table for e in events] == [PROGRESS_TABLE]
        assert mock_db.info == {}

    @pytest.mark.asyncio
    async def test_rollback_discards_events(self, mock_db, notifier):
        mock_db.commit = AsyncMock()
        mock_db.rollback = AsyncMock()
        events = []
        notifier.subscribe(PROGRESS_TABLE, "u1", events.append)
        store = _progress_store(notifier)
        entry = ProgressEntry(user_id="u1", date=NOW, mood_score=5, activities=["meditation"])

        gen = get_db(_request_for(mock_db))
        db = await gen.__anext__()
        await store.insert_progress(db, entry)

        with pytest.raises(RuntimeError):
            await gen.athrow(RuntimeError("handler failed"))
        mock_db.rollback.assert_awaited_once()
        mock_db.commit.assert_not_awaited()
        assert events == []
        assert publish_pending_events(mock_db) == 0

    @pytest.mark.asyncio
    async def test_failed_commit_discards_events(self, mock_db, notifier):
        mock_db.commit = AsyncMock(side_effect=OperationalError("COMMIT", {}, Exception("lost")))
        mock_db.rollback = AsyncMock()
        events = []
        notifier.subscribe(PROGRESS_TABLE, "u1", events.append)
        store = _progress_store(notifier)
        entry = ProgressEntry(user_id="u1", date=NOW, mood_score=5, activities=["meditation"])

        gen = get_db(_request_for(mock_db))
        db = await gen.__anext__()
        await store.insert_progress(db, entry)

        with pytest.raises(OperationalError):
            await gen.__anext__()
        assert events == []
        assert mock_db.info == {}

    def test_discard_without_queue(self, mock_db):
        discard_pending_events(mock_db)
        assert publish_pending_events(mock_db) == 0


class TestSessionRepositorySnapshot:

    def _row(self):
        return AssessmentSessionRow(
            session_id="s1",
            user_id="u1",
            state="awaiting_branch",
            current_qid="mood-3",
            answers={"initial-1": 0, "mood-1": 1, "mood-2": 1},
            pending=["mood-3"],
        )

    def _snapshot(self, **overrides):
        snap = {
            "state": "complete",
            "current_qid": "mood-3",
            "answers": {"initial-1": 0, "mood-1": 1, "mood-2": 1, "mood-3": 2},
            "pending": [],
            "primary_concern": "Mood and Emotions",
            "submission_error": None,
        }
        snap.update(overrides)
        return snap

    @pytest.mark.asyncio
    async def test_completion_stamps_timestamp_and_assessment(self):
        db = AsyncMock()
        row = self._row()
        await SessionRepository().save_snapshot(db, row, self._snapshot(), assessment_id="a1")
        assert row.state == "complete"
        assert row.completed_at is not None
        assert row.assessment_id == "a1"
        assert row.answers["mood-3"] == 2
        db.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_reset_clears_completion(self):
        db = AsyncMock()
        row = self._row()
        repo = SessionRepository()
        await repo.save_snapshot(db, row, self._snapshot(), assessment_id="a1")
        await repo.save_snapshot(
            db,
            row,
            self._snapshot(
                state="awaiting_root",
                current_qid="initial-1",
                answers={},
                primary_concern=None,
            ),
        )
        assert row.completed_at is None
        assert row.assessment_id is None
        assert row.answers == {}

    @pytest.mark.asyncio
    async def test_dismiss_keeps_assessment_id(self):
        db = AsyncMock()
        row = self._row()
        repo = SessionRepository()
        await repo.save_snapshot(db, row, self._snapshot(), assessment_id="a1")
        await repo.save_snapshot(db, row, self._snapshot())
        assert row.assessment_id == "a1"
