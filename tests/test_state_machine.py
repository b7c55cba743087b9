"""AssessmentSession transitions, progress, snapshots and finalisation.

The session is exercised directly, without the engine or a database.
Finalisation uses the in-memory MockAssessmentStore from test_engine.py.
"""

from datetime import datetime, timezone

import pytest

from mindcheck_assessment.errors import InvalidOption, InvalidState
from mindcheck_assessment.state_machine import AssessmentSession, AssessmentState

from test_engine import MockAssessmentStore

ANXIETY = 1


@pytest.fixture
def session(bank):
    return AssessmentSession(bank)


def _complete(session, root=ANXIETY, values=(2, 2, 2)):
    session.answer(root)
    for v in values:
        session.answer(v)
    return session


class TestTransitions:

    def test_initial_state(self, session):
        assert session.state is AssessmentState.AWAITING_ROOT
        assert session.current_qid == "initial-1"
        assert session.answers == {}
        assert session.pending == []
        assert session.primary_concern is None

    def test_root_answer_seeds_branch(self, session):
        state = session.answer(ANXIETY)
        assert state is AssessmentState.AWAITING_BRANCH
        assert session.primary_concern == "Anxiety and Stress"
        assert session.pending == ["anxiety-1", "anxiety-2", "anxiety-3"]
        assert session.current_qid == "anxiety-1"
        assert session.answers == {"initial-1": ANXIETY}

    def test_branch_answers_in_order(self, session):
        session.answer(ANXIETY)
        session.answer(0)
        assert session.current_qid == "anxiety-2"
        assert session.pending == ["anxiety-2", "anxiety-3"]
        session.answer(1)
        assert session.current_qid == "anxiety-3"
        assert session.answer(3) is AssessmentState.COMPLETE
        assert session.pending == []
        assert list(session.answers) == ["initial-1", "anxiety-1", "anxiety-2", "anxiety-3"]

    def test_progress_steps(self, session):
        assert session.progress == 0.0
        session.answer(ANXIETY)
        assert session.progress == 25.0
        session.answer(0)
        assert session.progress == 50.0
        session.answer(0)
        assert session.progress == 75.0
        session.answer(0)
        assert session.progress == 100.0

    def test_question_number_caps_at_total(self, session):
        assert session.question_number == 1
        _complete(session)
        assert session.question_number == 4

    def test_answer_after_complete(self, session):
        _complete(session)
        with pytest.raises(InvalidState):
            session.answer(0)

    @pytest.mark.parametrize("bad", [-1, 5, 99, "1", 1.0, None, True])
    def test_invalid_root_option_leaves_state(self, session, bad):
        with pytest.raises(InvalidOption):
            session.answer(bad)
        assert session.state is AssessmentState.AWAITING_ROOT
        assert session.answers == {}
        assert session.primary_concern is None

    def test_invalid_branch_option_leaves_state(self, session):
        session.answer(ANXIETY)
        before = session.snapshot()
        with pytest.raises(InvalidOption) as exc_info:
            session.answer(4)
        assert exc_info.value.qid == "anxiety-1"
        assert exc_info.value.option_count == 4
        assert session.snapshot() == before

    def test_reset_from_complete(self, session):
        _complete(session)
        session.submission_error = "boom"
        session.reset()
        assert session.state is AssessmentState.AWAITING_ROOT
        assert session.current_qid == "initial-1"
        assert session.answers == {}
        assert session.pending == []
        assert session.primary_concern is None
        assert session.submission_error is None
        assert session.progress == 0.0


class TestResults:

    def test_severity_requires_complete(self, session):
        session.answer(ANXIETY)
        with pytest.raises(InvalidState):
            session.severity()

    def test_severity_and_recommendations(self, session):
        _complete(session, values=(3, 3, 3))
        result = session.severity()
        assert result.level == "major"
        assert result.score == 15
        assert session.recommendations().endswith(
            "Practice deep breathing exercises and progressive muscle relaxation."
        )


class TestSnapshot:

    def test_round_trip_mid_branch(self, bank, session):
        session.answer(ANXIETY)
        session.answer(2)
        restored = AssessmentSession.restore(bank, session.snapshot())
        assert restored.snapshot() == session.snapshot()
        assert restored.state is AssessmentState.AWAITING_BRANCH
        restored.answer(1)
        assert restored.current_qid == "anxiety-3"

    def test_restore_coerces_json_answers(self, bank):
        data = {
            "state": "awaiting_branch",
            "current_qid": "sleep-2",
            "answers": {"initial-1": "2", "sleep-1": 1},
            "pending": ["sleep-2", "sleep-3"],
            "primary_concern": "Sleep and Energy",
            "submission_error": None,
        }
        restored = AssessmentSession.restore(bank, data)
        assert restored.answers == {"initial-1": 2, "sleep-1": 1}


class TestFinalize:

    NOW = datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)

    @pytest.mark.asyncio
    async def test_saves_with_user(self, session):
        store = MockAssessmentStore()
        _complete(session)
        saved = await session.finalize(store, None, user_id="u1", now=self.NOW)
        assert saved is not None
        assert saved.id is not None
        assert saved.assessment_date == self.NOW
        assert saved.severity_level == "mild"
        assert saved.score == 10
        assert session.submission_error is None

    @pytest.mark.asyncio
    async def test_skipped_without_user(self, session):
        store = MockAssessmentStore()
        _complete(session)
        assert await session.finalize(store, None, user_id=None) is None
        assert store.assessments == []
        assert session.submission_error is None

    @pytest.mark.asyncio
    async def test_failure_recorded_and_state_kept(self, session):
        store = MockAssessmentStore()
        store.fail = True
        _complete(session)
        assert await session.finalize(store, None, user_id="u1") is None
        assert session.submission_error == "Could not save your assessment. Please try again."
        assert session.is_complete

        session.dismiss_error()
        assert session.submission_error is None
        assert session.is_complete

    @pytest.mark.asyncio
    async def test_finalize_requires_complete(self, session):
        with pytest.raises(InvalidState):
            await session.finalize(MockAssessmentStore(), None, user_id="u1")
