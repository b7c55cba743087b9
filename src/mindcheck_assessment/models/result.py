"""Derived results and stored records.

  - SeverityResult: classifier output, recomputed on demand, never stored alone
  - AssessmentRecord: a completed assessment as held by the external store
  - ProgressEntry: one mood/activity record on a user's progress timeline
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

SeverityLevel = Literal["minor", "mild", "major"]


class SeverityResult(BaseModel):
    """Severity classification of a completed answer record."""

    model_config = ConfigDict(frozen=True)

    level: SeverityLevel
    score: int = Field(ge=0, le=20)


class AssessmentRecord(BaseModel):
    """Persisted assessment — built by the engine, owned by the store."""

    id: Optional[str] = None
    user_id: str
    assessment_date: datetime
    severity_level: SeverityLevel
    score: int = Field(ge=0, le=20)
    recommendations: str


class ProgressEntry(BaseModel):
    """Mood score and activities for a single day."""

    id: Optional[str] = None
    user_id: str
    date: datetime
    mood_score: int = Field(ge=1, le=10)
    activities: List[str] = []
