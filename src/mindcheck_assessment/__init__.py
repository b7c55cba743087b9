"""mindcheck_assessment — adaptive mental-wellness assessment SDK.

Public API:
    QuestionBank       — loads the question YAML into typed models with lookups
    AssessmentSession  — in-memory question sequencing state machine
    AssessmentState    — awaiting_root / awaiting_branch / complete
    AssessmentEngine   — stateless, DB-backed orchestrator over the state machine
    classify           — answer record -> SeverityResult
    compose_recommendation — severity + primary concern -> recommendation text
    StepResult         — union type returned by engine step methods
    QuestionStep       — step: present one question
    CompletionStep     — step: the classified result
    SessionInfo        — public view of session state

Collaborator interfaces and implementations:
    AssessmentStore    — persistence adapter (DatabaseAssessmentStore)
    ChangeNotifier     — change subscriptions (InMemoryChangeNotifier)
    SchedulingService  — counselor booking (HttpSchedulingService)

Supporting features:
    ProgressFeed       — cached per-user progress timeline
    ChatResponder      — ordered keyword rules for the chat companion
    SummaryRenderer    — Jinja2 text rendering of steps
"""

from mindcheck_assessment.chat import GREETING, ChatConversation, ChatResponder
from mindcheck_assessment.classifier import classify
from mindcheck_assessment.composer import compose_recommendation
from mindcheck_assessment.engine import AssessmentEngine
from mindcheck_assessment.errors import (
    AssessmentError,
    ErrorKind,
    InsufficientData,
    InvalidOption,
    InvalidState,
    PersistenceFailure,
    QuestionNotFound,
    SessionNotFound,
    UnknownConcern,
)
from mindcheck_assessment.interfaces import (
    AssessmentStore,
    ChangeEvent,
    ChangeNotifier,
    SchedulingService,
)
from mindcheck_assessment.models.session import (
    CompletionStep,
    QuestionStep,
    SessionInfo,
    StepResult,
)
from mindcheck_assessment.notifications import InMemoryChangeNotifier
from mindcheck_assessment.persistence import DatabaseAssessmentStore
from mindcheck_assessment.progress import ProgressFeed
from mindcheck_assessment.question_bank import QuestionBank
from mindcheck_assessment.scheduling import HttpSchedulingService
from mindcheck_assessment.state_machine import AssessmentSession, AssessmentState
from mindcheck_assessment.summary import SummaryRenderer

__all__ = [
    # Core
    "AssessmentEngine",
    "AssessmentSession",
    "AssessmentState",
    "QuestionBank",
    "classify",
    "compose_recommendation",
    # Session / step
    "CompletionStep",
    "QuestionStep",
    "SessionInfo",
    "StepResult",
    # Errors
    "AssessmentError",
    "ErrorKind",
    "InsufficientData",
    "InvalidOption",
    "InvalidState",
    "PersistenceFailure",
    "QuestionNotFound",
    "SessionNotFound",
    "UnknownConcern",
    # Collaborators
    "AssessmentStore",
    "ChangeEvent",
    "ChangeNotifier",
    "DatabaseAssessmentStore",
    "HttpSchedulingService",
    "InMemoryChangeNotifier",
    "SchedulingService",
    # Supporting features
    "ChatConversation",
    "ChatResponder",
    "GREETING",
    "ProgressFeed",
    "SummaryRenderer",
]
