"""Initial schema: assessment sessions, assessments, progress, counselors.

Creates the four mindcheck tables:
  - assessment_sessions: state-machine snapshots of in-flight assessments
  - assessments: completed, classified assessments per user
  - progress_tracking: daily mood score and activities per user
  - counselor_profiles: counselor enrollment submissions

Revision ID: 20261019_initial
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, TIMESTAMP, UUID

# revision identifiers, used by Alembic.
revision = "20261019_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # --- assessment_sessions ---
    op.create_table(
        "assessment_sessions",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("session_id", sa.Text(), nullable=False, unique=True),
        sa.Column("user_id", sa.Text(), nullable=True),
        sa.Column("state", sa.String(20), nullable=False),
        sa.Column("current_qid", sa.Text(), nullable=False),
        sa.Column(
            "answers", JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")
        ),
        sa.Column(
            "pending", JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")
        ),
        sa.Column("primary_concern", sa.Text(), nullable=True),
        sa.Column("submission_error", sa.Text(), nullable=True),
        sa.Column("assessment_id", sa.Text(), nullable=True),
        sa.Column("created_at", TIMESTAMP(timezone=True), nullable=False),
        sa.Column("updated_at", TIMESTAMP(timezone=True), nullable=False),
        sa.Column("completed_at", TIMESTAMP(timezone=True), nullable=True),
        sa.CheckConstraint(
            "state IN ('awaiting_root', 'awaiting_branch', 'complete')",
            name="ck_session_state",
        ),
        sa.CheckConstraint(
            "state != 'complete' OR completed_at IS NOT NULL",
            name="ck_complete_has_timestamp",
        ),
    )
    op.create_index(
        "ix_assessment_sessions_user_id", "assessment_sessions", ["user_id"]
    )
    op.create_index(
        "ix_session_state_updated", "assessment_sessions", ["state", "updated_at"]
    )

    # --- assessments ---
    op.create_table(
        "assessments",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", sa.Text(), nullable=False),
        sa.Column("assessment_date", TIMESTAMP(timezone=True), nullable=False),
        sa.Column("severity_level", sa.String(10), nullable=False),
        sa.Column("score", sa.SmallInteger(), nullable=False),
        sa.Column("recommendations", sa.Text(), nullable=False),
        sa.CheckConstraint("score BETWEEN 0 AND 20", name="ck_assessment_score_range"),
        sa.CheckConstraint(
            "severity_level IN ('minor', 'mild', 'major')",
            name="ck_assessment_severity",
        ),
    )
    op.create_index(
        "ix_assessments_user_date", "assessments", ["user_id", "assessment_date"]
    )

    # --- progress_tracking ---
    op.create_table(
        "progress_tracking",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", sa.Text(), nullable=False),
        sa.Column("date", TIMESTAMP(timezone=True), nullable=False),
        sa.Column("mood_score", sa.SmallInteger(), nullable=False),
        sa.Column(
            "activities", ARRAY(sa.Text()), nullable=False, server_default=sa.text("'{}'")
        ),
        sa.CheckConstraint("mood_score BETWEEN 1 AND 10", name="ck_progress_mood_range"),
    )
    op.create_index("ix_progress_user_date", "progress_tracking", ["user_id", "date"])

    # --- counselor_profiles ---
    op.create_table(
        "counselor_profiles",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", sa.Text(), nullable=False),
        sa.Column("full_name", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("education", sa.Text(), nullable=False),
        sa.Column("specialization", ARRAY(sa.Text()), nullable=False),
        sa.Column("experience_years", sa.SmallInteger(), nullable=False),
        sa.Column("license_number", sa.Text(), nullable=False),
        sa.Column("bio", sa.Text(), nullable=False),
        sa.Column("availability", sa.Text(), nullable=True),
        sa.Column("created_at", TIMESTAMP(timezone=True), nullable=False),
        sa.CheckConstraint("experience_years >= 0", name="ck_counselor_experience"),
        sa.CheckConstraint(
            "cardinality(specialization) >= 1", name="ck_counselor_has_specialization"
        ),
    )
    op.create_index(
        "ix_counselor_profiles_user_id", "counselor_profiles", ["user_id"]
    )


def downgrade() -> None:
    op.drop_index("ix_counselor_profiles_user_id", table_name="counselor_profiles")
    op.drop_table("counselor_profiles")
    op.drop_index("ix_progress_user_date", table_name="progress_tracking")
    op.drop_table("progress_tracking")
    op.drop_index("ix_assessments_user_date", table_name="assessments")
    op.drop_table("assessments")
    op.drop_index("ix_session_state_updated", table_name="assessment_sessions")
    op.drop_index("ix_assessment_sessions_user_id", table_name="assessment_sessions")
    op.drop_table("assessment_sessions")
