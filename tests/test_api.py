"""HTTP API tests with FastAPI's TestClient.

The lifespan handler is not run (no ``with`` block), so no database is
touched: the shared services are placed on ``app.state`` by the fixture,
the engine uses the in-memory MockSessionRepository from test_engine.py,
and ``get_db`` is overridden to yield an AsyncMock session.
"""

import uuid
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from fastapi.testclient import TestClient

from mindcheck_assessment.chat import GREETING, ChatResponder
from mindcheck_assessment.engine import AssessmentEngine
from mindcheck_assessment.notifications import InMemoryChangeNotifier
from mindcheck_assessment.progress import ProgressFeed
from mindcheck_assessment.scheduling import HttpSchedulingService
from mindcheck_assessment.summary import SummaryRenderer
from mindcheck_server.app import create_app
from mindcheck_server.config import ServerSettings
from mindcheck_server.dependencies import get_db

from test_engine import MockAssessmentStore, MockSessionRepository

BASE = "/api/v1"
USER = {"X-User-ID": "user1"}
OTHER = {"X-User-ID": "user2"}


def _schedule_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(
        200, json={"success": True, "meetLink": "https://meet.test/xyz", "eventId": "ev9"},
    )


def _build_app(bank, settings=None):
    app = create_app(settings or ServerSettings())

    notifier = InMemoryChangeNotifier()
    store = MockAssessmentStore(notifier)
    engine = AssessmentEngine(bank, store)
    engine._repo = MockSessionRepository()

    counselor_repo = MagicMock()
    counselor_repo.create_profile = AsyncMock(
        side_effect=lambda db, *, user_id, **fields: SimpleNamespace(id=uuid.uuid4(), **fields)
    )

    app.state.bank = bank
    app.state.notifier = notifier
    app.state.store = store
    app.state.engine = engine
    app.state.feed = ProgressFeed(store, notifier)
    app.state.chat = ChatResponder().load()
    app.state.renderer = SummaryRenderer()
    app.state.counselor_repo = counselor_repo
    app.state.scheduler = HttpSchedulingService(
        "https://functions.example.test/schedule-session",
        transport=httpx.MockTransport(_schedule_handler),
    )

    async def _override_db():
        yield AsyncMock()

    app.dependency_overrides[get_db] = _override_db
    return app


@pytest.fixture
def app(bank):
    return _build_app(bank)


@pytest.fixture
def client(app):
    return TestClient(app)


def _create(client, session_id="s1", headers=USER):
    resp = client.post(f"{BASE}/assessments/sessions", json={"session_id": session_id}, headers=headers)
    assert resp.status_code == 201
    return resp.json()


def _answer(client, index, session_id="s1", headers=USER):
    return client.post(
        f"{BASE}/assessments/sessions/{session_id}/step",
        json={"option_index": index},
        headers=headers,
    )


def _complete(client, answers=(1, 2, 2, 2), session_id="s1", headers=USER):
    resp = None
    for index in answers:
        resp = _answer(client, index, session_id, headers)
        assert resp.status_code == 200
    return resp.json()


# =====================================================================
# Sessions and steps
# =====================================================================


class TestSessions:

    def test_create_and_get(self, client):
        created = _create(client)
        assert created["state"] == "awaiting_root"
        assert created["progress"] == 0.0

        resp = client.get(f"{BASE}/assessments/sessions/s1", headers=USER)
        assert resp.status_code == 200
        assert resp.json()["session_id"] == "s1"

    def test_duplicate_is_409(self, client):
        _create(client)
        resp = client.post(f"{BASE}/assessments/sessions", json={"session_id": "s1"}, headers=USER)
        assert resp.status_code == 409

    def test_other_user_gets_404(self, client):
        _create(client)
        resp = client.get(f"{BASE}/assessments/sessions/s1", headers=OTHER)
        assert resp.status_code == 404
        assert resp.json()["kind"] == "not_found"

    def test_list_requires_user(self, client):
        assert client.get(f"{BASE}/assessments/sessions").status_code == 401

    def test_list_own_sessions(self, client):
        _create(client, "a")
        _create(client, "b")
        _create(client, "c", headers=OTHER)
        resp = client.get(f"{BASE}/assessments/sessions", headers=USER)
        assert {s["session_id"] for s in resp.json()} == {"a", "b"}


class TestSteps:

    def test_first_step(self, client):
        _create(client)
        step = client.get(f"{BASE}/assessments/sessions/s1/step", headers=USER).json()
        assert step["type"] == "question"
        assert step["qid"] == "initial-1"
        assert len(step["options"]) == 5

    def test_full_flow_saves_result(self, client, app):
        _create(client)
        result = _complete(client)
        assert result["type"] == "complete"
        assert result["severity"] == {"level": "mild", "score": 10}
        assert result["primary_concern"] == "Anxiety and Stress"
        assert result["saved"] is True
        assert len(app.state.store.assessments) == 1

        history = client.get(f"{BASE}/assessments", headers=USER).json()
        assert [h["score"] for h in history] == [10]

    def test_anonymous_flow_not_saved(self, client, app):
        _create(client, "anon", headers={})
        result = _complete(client, session_id="anon", headers={})
        assert result["saved"] is False
        assert app.state.store.assessments == []

    def test_store_failure_reported_in_step(self, client, app):
        app.state.store.fail = True
        _create(client)
        result = _complete(client)
        assert result["saved"] is False
        assert result["submission_error"] == "Could not save your assessment. Please try again."

        info = client.delete(f"{BASE}/assessments/sessions/s1/error", headers=USER).json()
        assert info["submission_error"] is None

    def test_invalid_option_is_422(self, client):
        _create(client)
        resp = _answer(client, 7)
        assert resp.status_code == 422
        assert resp.json()["kind"] == "invalid_option"

    def test_answer_after_complete_is_409(self, client):
        _create(client)
        _complete(client)
        resp = _answer(client, 0)
        assert resp.status_code == 409
        assert resp.json()["kind"] == "invalid_state"

    def test_reset(self, client):
        _create(client)
        _complete(client)
        step = client.post(f"{BASE}/assessments/sessions/s1/reset", headers=USER).json()
        assert step["type"] == "question"
        assert step["qid"] == "initial-1"

    def test_summary_is_plain_text(self, client):
        _create(client)
        _complete(client, answers=(2, 3, 3, 3))
        resp = client.get(f"{BASE}/assessments/sessions/s1/summary", headers=USER)
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/plain")
        assert "Score: 15 / 20" in resp.text
        assert "Professional Support" in resp.text


# =====================================================================
# History, progress, chat
# =====================================================================


class TestUserData:

    def test_history_requires_user(self, client):
        assert client.get(f"{BASE}/assessments").status_code == 401

    def test_progress_logs_today(self, client):
        _create(client)
        _complete(client)
        body = client.get(f"{BASE}/progress", headers=USER).json()
        assert len(body["assessments"]) == 1
        assert len(body["entries"]) == 1
        assert body["entries"][0]["mood_score"] == 5
        assert body["streak"] == 1


class TestChat:

    def test_reply_and_context(self, client):
        resp = client.post(f"{BASE}/chat", json={"message": "the weather is nice"})
        assert resp.status_code == 200
        assert resp.json()["last_context"] == "the weather is nice"

        resp = client.post(
            f"{BASE}/chat",
            json={"message": "I feel better", "last_context": "so much stress"},
        )
        assert resp.json()["reply"].startswith("I'm so glad you're feeling better!")

    def test_whitespace_message_is_400(self, client):
        assert client.post(f"{BASE}/chat", json={"message": "   "}).status_code == 400

    def test_greeting(self, client):
        assert client.get(f"{BASE}/chat/greeting").json() == {"reply": GREETING}


# =====================================================================
# Counselors
# =====================================================================


class TestCounselors:

    def test_directory(self, client):
        counselors = client.get(f"{BASE}/counselors").json()
        assert counselors[0]["name"] == "Dr. Sarah Johnson"

    def test_booking(self, client):
        resp = client.post(
            f"{BASE}/counselors/sessions",
            json={
                "counselor_email": "sarah.johnson@mindcare.com",
                "patient_name": "Alex",
                "patient_email": "alex@example.com",
                "date_time": "2099-01-05T10:00:00Z",
            },
            headers=USER,
        )
        assert resp.status_code == 200
        assert resp.json() == {
            "success": True,
            "meet_link": "https://meet.test/xyz",
            "event_id": "ev9",
            "error": None,
        }

    def test_booking_unknown_counselor(self, client):
        resp = client.post(
            f"{BASE}/counselors/sessions",
            json={
                "counselor_email": "ghost@example.com",
                "patient_name": "Alex",
                "patient_email": "alex@example.com",
                "date_time": "2099-01-05T10:00:00Z",
            },
            headers=USER,
        )
        assert resp.status_code == 404

    def test_booking_in_the_past(self, client):
        resp = client.post(
            f"{BASE}/counselors/sessions",
            json={
                "counselor_email": "sarah.johnson@mindcare.com",
                "patient_name": "Alex",
                "patient_email": "alex@example.com",
                "date_time": "2001-01-05T10:00:00Z",
            },
            headers=USER,
        )
        assert resp.status_code == 400

    def test_enrollment(self, client, app):
        body = {
            "full_name": "Jamie Lee",
            "email": "jamie@example.com",
            "education": "MSc Clinical Psychology",
            "specialization": ["Stress Management"],
            "experience_years": 4,
            "license_number": "LIC-001",
            "bio": "Counselor.",
        }
        resp = client.post(f"{BASE}/counselors/enrollments", json=body, headers=USER)
        assert resp.status_code == 201
        assert resp.json()["full_name"] == "Jamie Lee"
        app.state.counselor_repo.create_profile.assert_awaited_once()

        body["specialization"] = []
        resp = client.post(f"{BASE}/counselors/enrollments", json=body, headers=USER)
        assert resp.status_code == 422


# =====================================================================
# Reference data and identity
# =====================================================================


class TestReference:

    def test_questions_root_first(self, client):
        questions = client.get(f"{BASE}/reference/questions").json()
        assert len(questions) == 16
        assert questions[0]["qid"] == "initial-1"

    def test_concerns(self, client):
        concerns = client.get(f"{BASE}/reference/concerns").json()
        assert [c["concern"] for c in concerns][0] == "Mood and Emotions"
        assert concerns[2]["branch"] == ["sleep-1", "sleep-2", "sleep-3"]

    def test_severity_levels(self, client):
        levels = client.get(f"{BASE}/reference/severity-levels").json()
        assert [lv["level"] for lv in levels] == ["minor", "mild", "major"]
        assert [lv["max_mean"] for lv in levels] == [1.0, 2.0, None]


class TestProxySecret:

    @pytest.fixture
    def secured(self, bank):
        return TestClient(_build_app(bank, ServerSettings(trusted_proxy_secret="s3cret")))

    def test_missing_secret_is_403(self, secured):
        resp = secured.post(f"{BASE}/assessments/sessions", json={"session_id": "x"}, headers=USER)
        assert resp.status_code == 403

    def test_wrong_secret_is_403(self, secured):
        headers = {**USER, "X-Proxy-Secret": "nope"}
        assert secured.get(f"{BASE}/assessments", headers=headers).status_code == 403

    def test_matching_secret(self, secured):
        headers = {**USER, "X-Proxy-Secret": "s3cret"}
        assert secured.get(f"{BASE}/assessments", headers=headers).status_code == 200

    def test_anonymous_needs_no_secret(self, secured):
        resp = secured.post(f"{BASE}/assessments/sessions", json={"session_id": "x"})
        assert resp.status_code == 201
