"""Counselor booking models.

``ScheduleRequest`` is what the booking flow hands to a
:class:`~mindcheck_assessment.interfaces.SchedulingService`; the service
answers with a ``ScheduleResult`` and never raises for remote failures.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

# Specializations a counselor can enroll with.
SPECIALIZATIONS: list[str] = [
    "Anxiety & Depression",
    "Relationship Counseling",
    "Career Guidance",
    "Stress Management",
    "Trauma & PTSD",
    "Addiction Recovery",
    "Youth Counseling",
    "Family Therapy",
]


class ScheduleRequest(BaseModel):
    """A meeting to book between a counselor and a patient."""

    counselor_name: str = Field(min_length=1)
    counselor_email: str = Field(min_length=3)
    patient_name: str = Field(min_length=1)
    patient_email: str = Field(min_length=3)
    date_time: datetime

    @field_validator("date_time")
    @classmethod
    def _aware(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            raise ValueError("date_time must include a timezone offset")
        return v

    def to_wire(self) -> dict:
        """camelCase body expected by the schedule-session function."""
        return {
            "counselorName": self.counselor_name,
            "counselorEmail": self.counselor_email,
            "patientName": self.patient_name,
            "patientEmail": self.patient_email,
            "dateTime": self.date_time.isoformat(),
        }


class ScheduleResult(BaseModel):
    """Outcome of a booking attempt."""

    success: bool
    meet_link: Optional[str] = None
    event_id: Optional[str] = None
    error: Optional[str] = None


class Counselor(BaseModel):
    """Directory entry shown on the counselor page."""

    name: str
    email: str
    specialization: str
    rating: float
    reviews: int


class CounselorEnrollment(BaseModel):
    """Profile submitted by a counselor joining the directory."""

    full_name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    education: str = Field(min_length=1)
    specialization: List[str] = Field(min_length=1)
    experience_years: int = Field(ge=0)
    license_number: str = Field(min_length=1)
    bio: str = Field(min_length=1)
    availability: Optional[str] = None

    @field_validator("email")
    @classmethod
    def _email_shape(cls, v: str) -> str:
        if "@" not in v:
            raise ValueError("email must contain '@'")
        return v

    @field_validator("specialization")
    @classmethod
    def _known_specializations(cls, v: List[str]) -> List[str]:
        unknown = [s for s in v if s not in SPECIALIZATIONS]
        if unknown:
            raise ValueError(f"unknown specializations: {unknown}")
        return v
