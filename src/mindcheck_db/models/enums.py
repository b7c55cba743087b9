"""Database-level enumerations."""

import enum


class SessionState(str, enum.Enum):
    """Stored state of an assessment session snapshot.

    Transitions:
        awaiting_root -> awaiting_branch  (root question answered)
        awaiting_branch -> complete       (third branch answer recorded)
        any -> awaiting_root              (reset)
    """

    AWAITING_ROOT = "awaiting_root"
    AWAITING_BRANCH = "awaiting_branch"
    COMPLETE = "complete"


class SeverityLevel(str, enum.Enum):
    MINOR = "minor"
    MILD = "mild"
    MAJOR = "major"
