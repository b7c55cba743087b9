"""ProgressRow ORM model — one mood/activity entry on a user's timeline."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Index, SmallInteger, Text, text
from sqlalchemy.dialects.postgresql import ARRAY, TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from mindcheck_db.models.base import Base


class ProgressRow(Base):
    __tablename__ = "progress_tracking"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id: Mapped[str] = mapped_column(Text, nullable=False)
    date: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    mood_score: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    activities: Mapped[list[str]] = mapped_column(
        ARRAY(Text),
        nullable=False,
        server_default=text("'{}'"),
    )

    __table_args__ = (
        CheckConstraint("mood_score BETWEEN 1 AND 10", name="ck_progress_mood_range"),
        Index("ix_progress_user_date", "user_id", "date"),
    )
