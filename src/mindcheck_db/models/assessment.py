"""AssessmentRow ORM model — one completed, classified assessment."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Index, SmallInteger, String, Text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from mindcheck_db.models.base import Base


class AssessmentRow(Base):
    __tablename__ = "assessments"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id: Mapped[str] = mapped_column(Text, nullable=False)
    assessment_date: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    severity_level: Mapped[str] = mapped_column(String(10), nullable=False)
    score: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    recommendations: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (
        CheckConstraint("score BETWEEN 0 AND 20", name="ck_assessment_score_range"),
        CheckConstraint(
            "severity_level IN ('minor', 'mild', 'major')",
            name="ck_assessment_severity",
        ),
        # History reads are always per user, oldest first
        Index("ix_assessments_user_date", "user_id", "assessment_date"),
    )

    def __repr__(self) -> str:
        return (
            f"<AssessmentRow(user={self.user_id!r}, level={self.severity_level!r}, "
            f"score={self.score})>"
        )
