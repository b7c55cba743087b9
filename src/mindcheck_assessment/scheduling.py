"""Counselor booking — directory and the HTTP scheduling client.

``HttpSchedulingService`` calls the remote ``schedule-session`` function,
which creates a one-hour calendar event with a video link and answers
``{"success": true, "meetLink": ..., "eventId": ...}`` or
``{"success": false, "error": ...}``.  Every remote failure is returned as
``ScheduleResult(success=False)``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import httpx

from mindcheck_assessment.interfaces import SchedulingService
from mindcheck_assessment.models.scheduling import Counselor, ScheduleRequest, ScheduleResult

logger = logging.getLogger(__name__)

COUNSELORS: list[Counselor] = [
    Counselor(
        name="Dr. Sarah Johnson",
        email="sarah.johnson@mindcare.com",
        specialization="Anxiety & Depression",
        rating=4.9,
        reviews=120,
    ),
]


def find_counselor(email: str) -> Counselor | None:
    for counselor in COUNSELORS:
        if counselor.email.lower() == email.lower():
            return counselor
    return None


def validate_future(request: ScheduleRequest, now: datetime | None = None) -> None:
    """Reject bookings for a time that has already passed.

    Raises:
        ValueError: if ``request.date_time`` is not in the future.
    """
    now = now or datetime.now(timezone.utc)
    if request.date_time <= now:
        raise ValueError("Cannot schedule a session in the past")


class HttpSchedulingService(SchedulingService):
    """Posts booking requests to the remote scheduling function.

    Args:
        url: full URL of the ``schedule-session`` function
        api_key: bearer token sent in the ``Authorization`` header
        timeout: request timeout in seconds
        transport: optional httpx transport (tests pass a MockTransport)
    """

    def __init__(
        self,
        url: str,
        api_key: str = "",
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    async def schedule(self, request: ScheduleRequest) -> ScheduleResult:
        validate_future(request)
        if not self._url:
            return ScheduleResult(success=False, error="Scheduling service is not configured")

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                resp = await client.post(
                    self._url, headers=self._headers(), json=request.to_wire()
                )
        except httpx.HTTPError as exc:
            logger.warning("Scheduling request failed: %s", exc)
            return ScheduleResult(success=False, error="Scheduling service unavailable")

        # the function reports its own errors in the body, even on 5xx
        try:
            data = resp.json()
        except ValueError:
            logger.warning("Scheduling service returned non-JSON (status %d)", resp.status_code)
            return ScheduleResult(
                success=False, error=f"Scheduling service error (HTTP {resp.status_code})"
            )

        if not isinstance(data, dict) or not data.get("success"):
            error = data.get("error") if isinstance(data, dict) else None
            return ScheduleResult(success=False, error=error or "Failed to schedule session")

        logger.info("Scheduled session with %s at %s", request.counselor_email, request.date_time)
        return ScheduleResult(
            success=True,
            meet_link=data.get("meetLink"),
            event_id=data.get("eventId"),
        )
