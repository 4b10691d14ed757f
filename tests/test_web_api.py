"""Tests for the Web API endpoints."""

import httpx
import pytest
from fastapi.testclient import TestClient

from tuition.core.link_titles import LinkTitleResolver
from tuition.db.progress_repository import ProgressRepository
from tuition.web.api import create_app

from conftest import PROGRESS_HEADERS, TEST_PASSWORD, FakeRowSource


@pytest.fixture
def client(repository, offline_resolver):
    """Test client backed by in-memory spreadsheet data."""
    app = create_app(repository=repository, resolver=offline_resolver)
    return TestClient(app)


@pytest.fixture
def session_id(client):
    response = client.post(
        "/api/login", json={"email": "alice@example.com", "password": TEST_PASSWORD}
    )
    return response.json()["session_id"]


class TestHealth:
    """Tests for GET /health."""

    def test_health_returns_ok(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["version"] == "0.1.0"
        assert "timestamp" in data
        assert data["spreadsheet_configured"] is True
        assert data["active_sessions"] == 0

    def test_health_counts_sessions(self, client, session_id):
        assert client.get("/health").json()["active_sessions"] == 1

    def test_health_unconfigured(self, monkeypatch, offline_resolver):
        monkeypatch.delenv("SPREADSHEET_ID", raising=False)
        client = TestClient(create_app(resolver=offline_resolver))
        assert client.get("/health").json()["spreadsheet_configured"] is False


class TestLogin:
    """Tests for POST /api/login."""

    def test_login_success(self, client):
        response = client.post(
            "/api/login", json={"email": " Alice@Example.com ", "password": TEST_PASSWORD}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["session_id"]
        assert data["student"]["student_name"] == "Alice Smith"
        assert data["student"]["previous_grades"] == ["Grade 5", "Grade 4"]
        assert len(data["progress"]) == 4

    def test_login_never_returns_password_hash(self, client):
        response = client.post(
            "/api/login", json={"email": "alice@example.com", "password": TEST_PASSWORD}
        )
        assert "password_hash" not in response.json()["student"]
        assert "pbkdf2" not in response.text

    def test_login_report_sections(self, client):
        response = client.post(
            "/api/login", json={"email": "alice@example.com", "password": TEST_PASSWORD}
        )
        report = response.json()["report"]
        assert [s["grade"] for s in report] == ["Grade 6", "Grade 5", "Grade 4", "Grade 3"]
        assert report[0]["is_current"] is True
        assert report[0]["completed"] == 1
        assert report[0]["total"] == 2
        assert report[0]["percentage"] == 50
        assert report[2]["total"] == 0

    def test_login_detail_parts(self, client):
        response = client.post(
            "/api/login", json={"email": "alice@example.com", "password": TEST_PASSWORD}
        )
        chords_task = response.json()["report"][1]["tasks"][0]
        assert [p["type"] for p in chords_task["detail_parts"]] == ["text", "chord", "text", "chord"]
        assert chords_task["detail_parts"][1]["fingering"] == "X32010"

    def test_wrong_password(self, client):
        response = client.post(
            "/api/login", json={"email": "alice@example.com", "password": "nope"}
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid credentials"

    def test_unknown_email_same_response(self, client):
        response = client.post(
            "/api/login", json={"email": "nobody@example.com", "password": TEST_PASSWORD}
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid credentials"

    def test_missing_fields(self, client):
        response = client.post("/api/login", json={"email": "alice@example.com"})
        assert response.status_code == 422

    def test_data_unavailable(self, offline_resolver):
        repository = ProgressRepository(FakeRowSource({}, fail=True))
        client = TestClient(create_app(repository=repository, resolver=offline_resolver))
        response = client.post(
            "/api/login", json={"email": "alice@example.com", "password": TEST_PASSWORD}
        )
        assert response.status_code == 503

    def test_unconfigured_spreadsheet(self, monkeypatch, offline_resolver):
        monkeypatch.delenv("SPREADSHEET_ID", raising=False)
        client = TestClient(create_app(resolver=offline_resolver))
        response = client.post(
            "/api/login", json={"email": "alice@example.com", "password": TEST_PASSWORD}
        )
        assert response.status_code == 503

    def test_link_titles_enriched(self, students_grid):
        grids = {
            "students": students_grid,
            "progress": [
                PROGRESS_HEADERS,
                ["S1", "Grade 6", "Pieces", "Minuet", "In Progress", "https://youtu.be/xyz, https://a.com"],
            ],
        }

        def handler(request):
            return httpx.Response(200, json={"title": "Minuet Tutorial"})

        resolver = LinkTitleResolver(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
        client = TestClient(
            create_app(repository=ProgressRepository(FakeRowSource(grids)), resolver=resolver)
        )

        response = client.post(
            "/api/login", json={"email": "alice@example.com", "password": TEST_PASSWORD}
        )

        links = response.json()["progress"][0]["resource_links"]
        assert links == [
            {"url": "https://youtu.be/xyz", "title": "Minuet Tutorial"},
            {"url": "https://a.com", "title": "https://a.com"},
        ]


class TestDashboard:
    """Tests for GET /api/sessions/{id}/dashboard."""

    def test_dashboard(self, client, session_id):
        response = client.get(f"/api/sessions/{session_id}/dashboard")
        assert response.status_code == 200
        data = response.json()
        assert data["session_id"] == session_id
        assert data["student"]["student_id"] == "S1"
        assert data["next_lesson"] == "Monday, Mar 3 at 04:30 PM (30 mins)"
        assert data["summary"] == {"completed": 2, "total": 4, "percentage": 50, "grades": 4}
        assert len(data["report"]) == 4

    def test_dashboard_not_found(self, client):
        response = client.get("/api/sessions/nonexistent/dashboard")
        assert response.status_code == 404

    def test_sessions_are_independent(self, client, session_id):
        other = client.post(
            "/api/login", json={"email": "bob@example.com", "password": TEST_PASSWORD}
        ).json()["session_id"]
        assert other != session_id
        data = client.get(f"/api/sessions/{other}/dashboard").json()
        assert data["student"]["student_id"] == "S2"
        assert data["next_lesson"] == ""


class TestRefresh:
    """Tests for POST /api/sessions/{id}/refresh."""

    def test_refresh_reloads_sheet(self, client, session_id, row_source):
        row_source.grids["progress"].append(["S1", "Grade 6", "Pieces", "Gavotte", "Completed", ""])
        row_source.calls.clear()

        response = client.post(f"/api/sessions/{session_id}/refresh")

        assert response.status_code == 200
        data = response.json()
        assert data["session_id"] == session_id
        assert data["summary"] == {"completed": 3, "total": 5, "percentage": 60, "grades": 4}
        assert row_source.calls == ["students,progress"]
        dashboard = client.get(f"/api/sessions/{session_id}/dashboard").json()
        assert dashboard["summary"]["total"] == 5

    def test_refresh_unknown_session(self, client):
        assert client.post("/api/sessions/nonexistent/refresh").status_code == 404

    def test_refresh_removed_student_ends_session(self, client, session_id, row_source):
        del row_source.grids["students"][1]

        response = client.post(f"/api/sessions/{session_id}/refresh")

        assert response.status_code == 404
        assert client.get(f"/api/sessions/{session_id}/dashboard").status_code == 404

    def test_refresh_unavailable_keeps_snapshot(self, client, session_id, row_source):
        row_source.fail = True

        response = client.post(f"/api/sessions/{session_id}/refresh")

        assert response.status_code == 503
        assert client.get(f"/api/sessions/{session_id}/dashboard").status_code == 200


class TestLogout:
    """Tests for DELETE /api/sessions/{id}."""

    def test_logout(self, client, session_id):
        response = client.delete(f"/api/sessions/{session_id}")
        assert response.status_code == 204
        assert client.get(f"/api/sessions/{session_id}/dashboard").status_code == 404

    def test_logout_unknown(self, client):
        assert client.delete("/api/sessions/nonexistent").status_code == 404


class TestTools:
    """Tests for /api/tools endpoints."""

    def test_note(self, client):
        response = client.get("/api/tools/note", params={"frequency": 440})
        assert response.status_code == 200
        data = response.json()
        assert data["label"] == "A4"
        assert data["cents"] == 0

    @pytest.mark.parametrize("frequency", ["0", "-82.4", "abc"])
    def test_note_invalid(self, client, frequency):
        response = client.get("/api/tools/note", params={"frequency": frequency})
        assert response.status_code == 422

    def test_note_missing(self, client):
        assert client.get("/api/tools/note").status_code == 422

    def test_chords(self, client):
        response = client.post("/api/tools/chords", json={"text": "Play (x32010) C now"})
        assert response.status_code == 200
        data = response.json()
        assert data["chord_count"] == 1
        assert data["parts"][0] == {"type": "text", "content": "Play ", "fingering": "", "name": ""}
        assert data["parts"][1]["name"] == "C"
