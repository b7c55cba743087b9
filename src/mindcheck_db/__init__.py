"""mindcheck_db — PostgreSQL persistence layer for mindcheck.

This package provides the ORM models, the ``Database`` engine owner, and
the repositories for assessment sessions, completed assessments, progress
entries and counselor enrollments.  It is consumed by the assessment SDK's
persistence adapter, the FastAPI server and the cleanup CLI.
"""

from mindcheck_db.engine import Database
from mindcheck_db.models.assessment import AssessmentRow
from mindcheck_db.models.enums import SessionState
from mindcheck_db.models.progress import ProgressRow
from mindcheck_db.models.session import AssessmentSessionRow
from mindcheck_db.repository import (
    AssessmentRepository,
    CounselorRepository,
    ProgressRepository,
    SessionRepository,
)

__all__ = [
    "AssessmentRepository",
    "AssessmentRow",
    "AssessmentSessionRow",
    "CounselorRepository",
    "Database",
    "ProgressRepository",
    "ProgressRow",
    "SessionRepository",
    "SessionState",
]
