"""Closed error taxonomy for the assessment SDK.

Every error raised by the SDK carries an :class:`ErrorKind`, so boundaries
(the engine, the HTTP layer) can dispatch on ``exc.kind`` exhaustively instead
of inspecting messages.

All errors subclass ``ValueError`` so callers that only care about "bad
input" can keep catching the builtin.
"""

import enum


class ErrorKind(str, enum.Enum):
    """Every failure category the SDK can report."""

    INVALID_OPTION = "invalid_option"
    INVALID_STATE = "invalid_state"
    UNKNOWN_CONCERN = "unknown_concern"
    INSUFFICIENT_DATA = "insufficient_data"
    PERSISTENCE_FAILURE = "persistence_failure"
    NOT_FOUND = "not_found"


class AssessmentError(ValueError):
    """Base class for SDK errors."""

    kind: ErrorKind


class InvalidOption(AssessmentError):
    """Option index outside the current question's range.  Re-prompt."""

    kind = ErrorKind.INVALID_OPTION

    def __init__(self, qid: str, option_index: object, option_count: int) -> None:
        self.qid = qid
        self.option_index = option_index
        self.option_count = option_count
        super().__init__(
            f"Option index {option_index!r} is out of range for question "
            f"'{qid}' ({option_count} options)"
        )


class InvalidState(AssessmentError):
    """Transition attempted from a state that does not allow it."""

    kind = ErrorKind.INVALID_STATE


class UnknownConcern(AssessmentError):
    """Primary concern outside the canonical root option labels."""

    kind = ErrorKind.UNKNOWN_CONCERN

    def __init__(self, concern: str) -> None:
        self.concern = concern
        super().__init__(f"Unknown primary concern: {concern!r}")


class InsufficientData(AssessmentError):
    """Classifier given an answer set with nothing to score."""

    kind = ErrorKind.INSUFFICIENT_DATA


class PersistenceFailure(AssessmentError):
    """Writing to or reading from the external store failed."""

    kind = ErrorKind.PERSISTENCE_FAILURE


class QuestionNotFound(AssessmentError):
    """Question identifier absent from the question bank."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, qid: str) -> None:
        self.qid = qid
        super().__init__(f"Question not found: {qid!r}")


class SessionNotFound(AssessmentError):
    """No assessment session with the given id is visible to the caller."""

    kind = ErrorKind.NOT_FOUND


class QuestionBankError(Exception):
    """The question bank data is malformed.  Fatal configuration error."""


class ChatRulesError(Exception):
    """The chat rule table is malformed.  Fatal configuration error."""
