"""CounselorProfileRow ORM model — counselor enrollment submissions."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, SmallInteger, Text
from sqlalchemy.dialects.postgresql import ARRAY, TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from mindcheck_db.models.base import Base


class CounselorProfileRow(Base):
    __tablename__ = "counselor_profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    # Account that submitted the enrollment
    user_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    full_name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False)
    education: Mapped[str] = mapped_column(Text, nullable=False)
    specialization: Mapped[list[str]] = mapped_column(ARRAY(Text), nullable=False)
    experience_years: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    license_number: Mapped[str] = mapped_column(Text, nullable=False)
    bio: Mapped[str] = mapped_column(Text, nullable=False)
    availability: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        CheckConstraint("experience_years >= 0", name="ck_counselor_experience"),
        CheckConstraint(
            "cardinality(specialization) >= 1", name="ck_counselor_has_specialization"
        ),
    )
