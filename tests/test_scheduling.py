"""HttpSchedulingService against an httpx.MockTransport, plus booking models."""

import json
from datetime import datetime, timedelta, timezone

import httpx
import pytest
from pydantic import ValidationError

from mindcheck_assessment.models.scheduling import CounselorEnrollment, ScheduleRequest
from mindcheck_assessment.scheduling import (
    COUNSELORS,
    HttpSchedulingService,
    find_counselor,
    validate_future,
)

URL = "https://functions.example.test/schedule-session"
FUTURE = datetime(2099, 1, 5, 10, 0, tzinfo=timezone.utc)


def _request(when=FUTURE):
    return ScheduleRequest(
        counselor_name="Dr. Sarah Johnson",
        counselor_email="sarah.johnson@mindcare.com",
        patient_name="Alex",
        patient_email="alex@example.com",
        date_time=when,
    )


def _service(handler, **kwargs):
    return HttpSchedulingService(URL, "secret-key", transport=httpx.MockTransport(handler), **kwargs)


class TestHttpSchedulingService:

    @pytest.mark.asyncio
    async def test_success(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["auth"] = request.headers["Authorization"]
            captured["body"] = json.loads(request.content)
            return httpx.Response(
                200, json={"success": True, "meetLink": "https://meet.test/abc", "eventId": "ev1"},
            )

        result = await _service(handler).schedule(_request())
        assert result.success is True
        assert result.meet_link == "https://meet.test/abc"
        assert result.event_id == "ev1"
        assert captured["auth"] == "Bearer secret-key"
        assert captured["body"] == {
            "counselorName": "Dr. Sarah Johnson",
            "counselorEmail": "sarah.johnson@mindcare.com",
            "patientName": "Alex",
            "patientEmail": "alex@example.com",
            "dateTime": "2099-01-05T10:00:00+00:00",
        }

    @pytest.mark.asyncio
    async def test_remote_error_body(self):
        def handler(request):
            return httpx.Response(500, json={"success": False, "error": "Calendar quota exceeded"})

        result = await _service(handler).schedule(_request())
        assert result.success is False
        assert result.error == "Calendar quota exceeded"

    @pytest.mark.asyncio
    async def test_failure_without_message(self):
        def handler(request):
            return httpx.Response(200, json={"success": False})

        result = await _service(handler).schedule(_request())
        assert result.error == "Failed to schedule session"

    @pytest.mark.asyncio
    async def test_non_json_response(self):
        def handler(request):
            return httpx.Response(502, text="Bad gateway")

        result = await _service(handler).schedule(_request())
        assert result.success is False
        assert result.error == "Scheduling service error (HTTP 502)"

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        result = await _service(handler).schedule(_request())
        assert result.success is False
        assert result.error == "Scheduling service unavailable"

    @pytest.mark.asyncio
    async def test_unconfigured_url(self):
        result = await HttpSchedulingService("").schedule(_request())
        assert result.success is False
        assert "not configured" in result.error

    @pytest.mark.asyncio
    async def test_past_time_rejected_before_any_request(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={"success": True})

        past = datetime.now(timezone.utc) - timedelta(minutes=5)
        with pytest.raises(ValueError, match="past"):
            await _service(handler).schedule(_request(past))
        assert calls == []


class TestModels:

    def test_naive_datetime_rejected(self):
        with pytest.raises(ValidationError):
            _request(datetime(2099, 1, 5, 10, 0))

    def test_validate_future_with_explicit_now(self):
        now = datetime(2099, 1, 5, 10, 0, tzinfo=timezone.utc)
        with pytest.raises(ValueError):
            validate_future(_request(now), now=now)
        validate_future(_request(now + timedelta(seconds=1)), now=now)

    def test_find_counselor_case_insensitive(self):
        assert find_counselor("SARAH.JOHNSON@mindcare.com") is COUNSELORS[0]
        assert find_counselor("nobody@example.com") is None

    def test_enrollment_valid(self):
        enrollment = CounselorEnrollment(
            full_name="Jamie Lee",
            email="jamie@example.com",
            education="MSc Clinical Psychology",
            specialization=["Stress Management", "Family Therapy"],
            experience_years=0,
            license_number="LIC-001",
            bio="Counselor.",
        )
        assert enrollment.availability is None

    @pytest.mark.parametrize(
        "override",
        [
            {"specialization": []},
            {"specialization": ["Astrology"]},
            {"experience_years": -1},
            {"email": "not-an-email"},
            {"bio": ""},
        ],
    )
    def test_enrollment_invalid(self, override):
        fields = {
            "full_name": "Jamie Lee",
            "email": "jamie@example.com",
            "education": "MSc Clinical Psychology",
            "specialization": ["Stress Management"],
            "experience_years": 3,
            "license_number": "LIC-001",
            "bio": "Counselor.",
        }
        fields.update(override)
        with pytest.raises(ValidationError):
            CounselorEnrollment(**fields)
