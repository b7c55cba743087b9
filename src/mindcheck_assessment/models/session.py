"""Session and step models — the contract between the engine and API callers.

These models define what the engine returns at each step of an assessment.
They are intentionally decoupled from the ORM models in ``mindcheck_db`` so
that API consumers never see database internals.

Step types:
  - QuestionStep: present the next question to the user
  - CompletionStep: the assessment is complete, with its classification

The ``StepResult`` union covers both cases so callers can dispatch on ``type``.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from mindcheck_assessment.models.result import SeverityResult


class OptionPayload(BaseModel):
    """One selectable option; ``index`` is what the caller submits."""

    index: int
    label: str


class QuestionStep(BaseModel):
    """Engine step: present one question and wait for an option index."""

    type: Literal["question"] = "question"
    state: str
    state_name: str
    qid: str
    question: str
    options: list[OptionPayload]
    category: str | None = None
    # 1-based position of this question and the fixed total
    question_number: int
    total_questions: int
    progress: float


class CompletionStep(BaseModel):
    """Engine step: the assessment finished.

    ``saved`` is False when no user identity was present or the store write
    failed; in the latter case ``submission_error`` carries the message.  The
    classification is valid either way.
    """

    type: Literal["complete"] = "complete"
    state: Literal["complete"] = "complete"
    severity: SeverityResult
    primary_concern: str
    recommendations: str
    # Severity-keyed follow-up resources (chat topics, videos, counselor referral)
    resources: dict
    saved: bool = False
    submission_error: str | None = None
    progress: float = 100.0


# Callers can match on step.type to dispatch rendering logic.
StepResult = QuestionStep | CompletionStep


class SessionInfo(BaseModel):
    """Public view of an assessment session.

    Maps from the ORM ``AssessmentSessionRow`` but exposes only what external
    callers need.
    """

    session_id: str
    user_id: str | None = None
    state: str
    current_qid: str
    primary_concern: str | None = None
    progress: float
    submission_error: str | None = None
    created_at: datetime
    updated_at: datetime
    completed_at: datetime | None = None
