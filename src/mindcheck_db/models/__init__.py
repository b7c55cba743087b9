"""ORM models for mindcheck_db."""

from mindcheck_db.models.assessment import AssessmentRow
from mindcheck_db.models.base import Base
from mindcheck_db.models.counselor import CounselorProfileRow
from mindcheck_db.models.enums import SessionState, SeverityLevel
from mindcheck_db.models.progress import ProgressRow
from mindcheck_db.models.session import AssessmentSessionRow

__all__ = [
    "AssessmentRow",
    "AssessmentSessionRow",
    "Base",
    "CounselorProfileRow",
    "ProgressRow",
    "SessionState",
    "SeverityLevel",
]
