"""Public model re-exports for mindcheck_assessment.

Consumers should import from ``mindcheck_assessment.models`` rather than
reaching into sub-modules directly.
"""

# --- Questions ---
from mindcheck_assessment.models.question import Category, Question

# --- Results / records ---
from mindcheck_assessment.models.result import (
    AssessmentRecord,
    ProgressEntry,
    SeverityLevel,
    SeverityResult,
)

# --- Session / step ---
from mindcheck_assessment.models.session import (
    CompletionStep,
    OptionPayload,
    QuestionStep,
    SessionInfo,
    StepResult,
)

# --- Chat ---
from mindcheck_assessment.models.chat import ChatReply, ChatRule, KeywordPredicate

# --- Counselor booking ---
from mindcheck_assessment.models.scheduling import (
    SPECIALIZATIONS,
    Counselor,
    CounselorEnrollment,
    ScheduleRequest,
    ScheduleResult,
)

__all__ = [
    # Questions
    "Category",
    "Question",
    # Results
    "AssessmentRecord",
    "ProgressEntry",
    "SeverityLevel",
    "SeverityResult",
    # Session
    "CompletionStep",
    "OptionPayload",
    "QuestionStep",
    "SessionInfo",
    "StepResult",
    # Chat
    "ChatReply",
    "ChatRule",
    "KeywordPredicate",
    # Counselor booking
    "SPECIALIZATIONS",
    "Counselor",
    "CounselorEnrollment",
    "ScheduleRequest",
    "ScheduleResult",
]
