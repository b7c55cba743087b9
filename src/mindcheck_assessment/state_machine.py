"""AssessmentSession — the in-memory question sequencing state machine.

States::

    awaiting_root --answer--> awaiting_branch --answer x3--> complete
          ^                                                     |
          +----------------------- reset() --------------------+

The root answer selects the primary concern and seeds the pending queue with
that branch's three follow-up qids.  Each branch answer pops the head of the
queue; an empty queue completes the session.

The session owns no storage.  :meth:`snapshot` / :meth:`restore` convert it
to and from a plain dict so a stateless caller (the engine) can persist it
between requests, and :meth:`finalize` hands the completed record to an
:class:`~mindcheck_assessment.interfaces.AssessmentStore`.

One in-flight ``answer()`` per session instance; instances are not shared.
"""

from __future__ import annotations

import enum
import logging
from datetime import datetime, timezone
from typing import Any

from mindcheck_assessment.classifier import classify
from mindcheck_assessment.composer import compose_recommendation
from mindcheck_assessment.constants import TOTAL_QUESTIONS
from mindcheck_assessment.errors import InvalidOption, InvalidState, PersistenceFailure
from mindcheck_assessment.interfaces import AssessmentStore
from mindcheck_assessment.models.question import Question
from mindcheck_assessment.models.result import AssessmentRecord, SeverityResult
from mindcheck_assessment.question_bank import QuestionBank

logger = logging.getLogger(__name__)


class AssessmentState(str, enum.Enum):
    AWAITING_ROOT = "awaiting_root"
    AWAITING_BRANCH = "awaiting_branch"
    COMPLETE = "complete"


class AssessmentSession:
    """One assessment attempt over a loaded :class:`QuestionBank`."""

    def __init__(self, bank: QuestionBank) -> None:
        self._bank = bank
        self.reset()

    # ==================================================================
    # Transitions
    # ==================================================================

    def reset(self) -> None:
        """Return to the initial state.  Valid from any state."""
        self.state = AssessmentState.AWAITING_ROOT
        self.current_qid: str = self._bank.root_qid
        self.answers: dict[str, int] = {}
        self.pending: list[str] = []
        self.primary_concern: str | None = None
        self.submission_error: str | None = None

    def answer(self, option_index: int) -> AssessmentState:
        """Record ``option_index`` for the current question and advance.

        Raises:
            InvalidState: if the session is already complete.
            InvalidOption: if the index is not an int within the current
                question's option range.  State is left unchanged.
        """
        if self.state is AssessmentState.COMPLETE:
            raise InvalidState("Cannot answer: assessment is already complete")

        question = self.current_question
        self._validate_index(question, option_index)

        if self.state is AssessmentState.AWAITING_ROOT:
            concern = question.option_label(option_index)
            # resolve the branch before mutating so a bad mapping leaves state intact
            branch = self._bank.branch_for(concern)
            self.answers[question.qid] = option_index
            self.primary_concern = concern
            self.pending = branch
            self.current_qid = branch[0]
            self.state = AssessmentState.AWAITING_BRANCH
            logger.debug("Root answered: concern=%s branch=%s", concern, branch)
            return self.state

        self.answers[question.qid] = option_index
        self.pending = [qid for qid in self.pending if qid != question.qid]
        if self.pending:
            self.current_qid = self.pending[0]
        else:
            self.state = AssessmentState.COMPLETE
            logger.debug("Assessment complete: %d answers", len(self.answers))
        return self.state

    @staticmethod
    def _validate_index(question: Question, option_index: Any) -> None:
        # bool is an int subclass but never a valid option index
        if (
            not isinstance(option_index, int)
            or isinstance(option_index, bool)
            or not 0 <= option_index < len(question.options)
        ):
            raise InvalidOption(question.qid, option_index, len(question.options))

    def dismiss_error(self) -> None:
        """Clear the submission-error slot after the user has seen it."""
        self.submission_error = None

    # ==================================================================
    # Derived values
    # ==================================================================

    @property
    def current_question(self) -> Question:
        return self._bank.lookup(self.current_qid)

    @property
    def is_complete(self) -> bool:
        return self.state is AssessmentState.COMPLETE

    @property
    def progress(self) -> float:
        """Percentage of the fixed question total answered so far."""
        if not self.answers:
            return 0.0
        return len(self.answers) / TOTAL_QUESTIONS * 100

    @property
    def question_number(self) -> int:
        """1-based position of the current question."""
        return min(len(self.answers) + 1, TOTAL_QUESTIONS)

    def severity(self) -> SeverityResult:
        """Classify the completed answer record.

        Raises:
            InvalidState: if the session is not complete.
        """
        if not self.is_complete:
            raise InvalidState("Severity is only available once the assessment is complete")
        return classify(self.answers, self._bank)

    def recommendations(self) -> str:
        """Recommendation text for the completed session."""
        result = self.severity()
        return compose_recommendation(result.level, self.primary_concern)

    # ==================================================================
    # Finalisation
    # ==================================================================

    async def finalize(
        self,
        store: AssessmentStore,
        db: Any,
        *,
        user_id: str | None,
        now: datetime | None = None,
    ) -> AssessmentRecord | None:
        """Hand the completed assessment to ``store``.

        Returns the stored record, or None when skipped (no user identity)
        or when the write failed.  A ``PersistenceFailure`` is captured into
        :attr:`submission_error`; the session stays complete.
        """
        result = self.severity()
        text = compose_recommendation(result.level, self.primary_concern)
        if not user_id:
            logger.debug("No user identity; skipping assessment hand-off")
            return None

        record = AssessmentRecord(
            user_id=user_id,
            assessment_date=now or datetime.now(timezone.utc),
            severity_level=result.level,
            score=result.score,
            recommendations=text,
        )
        try:
            saved = await store.insert_assessment(db, record)
        except PersistenceFailure as exc:
            logger.warning("Failed to save assessment for user %s: %s", user_id, exc)
            self.submission_error = str(exc)
            return None
        self.submission_error = None
        return saved

    # ==================================================================
    # Snapshot / restore
    # ==================================================================

    def snapshot(self) -> dict[str, Any]:
        """Plain-dict copy of the session, JSON-serialisable."""
        return {
            "state": self.state.value,
            "current_qid": self.current_qid,
            "answers": dict(self.answers),
            "pending": list(self.pending),
            "primary_concern": self.primary_concern,
            "submission_error": self.submission_error,
        }

    @classmethod
    def restore(cls, bank: QuestionBank, data: dict[str, Any]) -> AssessmentSession:
        """Rebuild a session from :meth:`snapshot` output."""
        session = cls(bank)
        session.state = AssessmentState(data["state"])
        session.current_qid = data["current_qid"]
        session.answers = {k: int(v) for k, v in (data.get("answers") or {}).items()}
        session.pending = list(data.get("pending") or [])
        session.primary_concern = data.get("primary_concern")
        session.submission_error = data.get("submission_error")
        return session
