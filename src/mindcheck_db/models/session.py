"""AssessmentSessionRow ORM model — one row per in-flight assessment.

The row is a snapshot of the in-memory state machine: the engine restores
an ``AssessmentSession`` from it, applies one transition, and writes the
snapshot back.  Answers and the pending queue live in JSONB so a single
row replays the whole session.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Index, String, Text, text
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from mindcheck_db.models.base import Base
from mindcheck_db.models.enums import SessionState


class AssessmentSessionRow(Base):
    """One row per assessment attempt.

    ``user_id`` is null for anonymous sessions; their results are never
    handed to the assessment store.
    """

    __tablename__ = "assessment_sessions"

    # --- Primary key ---
    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    # --- Identity ---
    # Caller-supplied session identifier
    session_id: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    user_id: Mapped[str | None] = mapped_column(Text, nullable=True, index=True)

    # --- State machine snapshot ---
    state: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=SessionState.AWAITING_ROOT,
    )
    current_qid: Mapped[str] = mapped_column(Text, nullable=False)
    # qid -> 0-based option index, in answer order
    answers: Mapped[dict] = mapped_column(
        JSONB,
        nullable=False,
        server_default=text("'{}'::jsonb"),
    )
    # Remaining branch qids, head is the current question
    pending: Mapped[list] = mapped_column(
        JSONB,
        nullable=False,
        server_default=text("'[]'::jsonb"),
    )
    primary_concern: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Last persistence failure message, cleared on dismiss or reset
    submission_error: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Id of the stored assessment once the completed result was handed off
    assessment_id: Mapped[str | None] = mapped_column(Text, nullable=True)

    # --- Timestamps ---
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        TIMESTAMP(timezone=True), nullable=True
    )

    __table_args__ = (
        CheckConstraint(
            "state IN ('awaiting_root', 'awaiting_branch', 'complete')",
            name="ck_session_state",
        ),
        # Completed sessions record when they finished
        CheckConstraint(
            "state != 'complete' OR completed_at IS NOT NULL",
            name="ck_complete_has_timestamp",
        ),
        # Stale-session cleanup scans by state and age
        Index("ix_session_state_updated", "state", "updated_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<AssessmentSessionRow(session={self.session_id!r}, "
            f"user={self.user_id!r}, state={self.state!r}, qid={self.current_qid!r})>"
        )
