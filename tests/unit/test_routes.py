"""Unit tests for the HTTP routes"""

import pytest
from fastapi.testclient import TestClient

from case_portal.infrastructure.api.client import get_api_client
from case_portal.main import app

MEMBER = {"X-User-ID": "member-7", "X-User-Role": "user"}
OWNER = {"X-User-ID": "owner-1"}
ADMIN = {"X-User-ID": "admin-1", "X-User-Role": "admin"}

SIGHTING_FORM = {
    "sightingDate": "2024-01-01",
    "sightingTime": "10:00",
    "city": "Addis Ababa",
    "specificLocation": "Bole, near Edna Mall",
    "description": "Saw the person walking near the mall entrance",
    "personCondition": "unknown",
    "wasAlone": True,
}


@pytest.fixture
def client(api_client):
    app.dependency_overrides[get_api_client] = lambda: api_client
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.mark.unit
class TestCaseRoutes:

    def test_case_view_for_member(self, client, fake_api, sighting_factory):
        fake_api.sightings["c1"] = [
            sighting_factory("s2", createdAt="2024-01-04T10:00:00Z"),
            sighting_factory("s1", createdAt="2024-01-03T10:00:00Z"),
        ]

        response = client.get("/api/v1/cases/c1", headers=MEMBER)

        assert response.status_code == 200
        body = response.json()
        assert body["case"]["id"] == "c1"
        assert body["status_label"] == "Active"
        assert body["priority_label"] == "High Priority"
        assert body["actions"] == ["report_sighting"]
        assert [s["index"] for s in body["sightings"]] == [1, 2]
        assert body["sightings"][0]["sighting"]["id"] == "s1"

    def test_case_view_anonymous(self, client):
        response = client.get("/api/v1/cases/c1")

        assert response.status_code == 200
        assert response.json()["actions"] == []

    def test_unknown_case(self, client):
        response = client.get("/api/v1/cases/nope", headers=MEMBER)

        assert response.status_code == 404
        assert response.json()["detail"]["back_to"] == "/missing-persons"

    def test_unknown_role_rejected(self, client):
        response = client.get("/api/v1/cases/c1", headers={"X-User-ID": "u", "X-User-Role": "root"})
        assert response.status_code == 401

    def test_api_down_returns_bad_gateway(self, client, fake_api):
        fake_api.fail_once("GET", "/missing-persons/c1", 503)
        assert client.get("/api/v1/cases/c1", headers=MEMBER).status_code == 502

    def test_verify_as_admin(self, client, fake_api):
        response = client.post("/api/v1/cases/c1/verify", headers=ADMIN)

        assert response.status_code == 200
        assert response.json()["notice"]["message"] == "Case verified successfully"
        assert fake_api.calls("PUT") == [("PUT", "/missing-persons/c1", {"isVerified": True})]

    def test_verify_as_member_is_forbidden(self, client, fake_api):
        response = client.post("/api/v1/cases/c1/verify", headers=MEMBER)

        assert response.status_code == 403
        assert fake_api.calls("PUT") == []

    def test_mark_found_requires_location(self, client):
        response = client.post("/api/v1/cases/c1/found", headers=OWNER, json={"foundLocation": ""})

        assert response.status_code == 422
        assert "found_location" in response.json()["errors"]

    def test_mark_found(self, client, fake_api):
        response = client.post(
            "/api/v1/cases/c1/found", headers=OWNER, json={"foundLocation": "Merkato", "notes": "Safe"}
        )

        assert response.status_code == 200
        assert fake_api.cases["c1"]["status"] == "found"

    def test_delete_needs_confirmation(self, client, fake_api):
        assert client.delete("/api/v1/cases/c1", headers=OWNER).status_code == 409
        assert "c1" in fake_api.cases

        response = client.delete("/api/v1/cases/c1?confirm=true", headers=OWNER)
        assert response.status_code == 200
        assert response.json()["navigate_to"] == "/missing-persons"

    def test_report_sighting_on_found_case(self, client, fake_api):
        fake_api.cases["c1"]["status"] = "found"

        response = client.post("/api/v1/cases/c1/report-sighting", headers=MEMBER)

        assert response.status_code == 409
        assert response.json()["navigate_to"] == "/missing-persons/c1"

    def test_edit(self, client):
        assert client.get("/api/v1/cases/c1/edit", headers=OWNER).json()["navigate_to"] == "/edit-report/c1"
        assert client.get("/api/v1/cases/c1/edit", headers=MEMBER).status_code == 403


@pytest.mark.unit
class TestSightingRoutes:

    def test_validate_step(self, client):
        response = client.post(
            "/api/v1/cases/c1/sightings/validate?step=3",
            headers=MEMBER,
            json={"description": "too short", "wasAlone": False},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["valid"] is False
        assert set(body["errors"]) == {"description", "companion_description"}

    def test_validate_submit_step_returns_review_summary(self, client):
        response = client.post("/api/v1/cases/c1/sightings/validate?step=4", headers=MEMBER, json=SIGHTING_FORM)

        assert response.status_code == 200
        body = response.json()
        assert body["valid"] is True
        assert body["summary"] == {
            "date_time": "2024-01-01 at 10:00",
            "location": "Bole, near Edna Mall, Addis Ababa",
            "condition": "Unknown / Couldn't Tell",
            "alone": "Yes",
        }

    def test_validate_earlier_step_has_no_summary(self, client):
        response = client.post("/api/v1/cases/c1/sightings/validate?step=1", headers=MEMBER, json=SIGHTING_FORM)
        assert response.json()["summary"] is None

    def test_validate_uses_reporter_offset(self, client):
        form = dict(SIGHTING_FORM, sightingDate="2999-01-01", utcOffsetMinutes=180)

        response = client.post("/api/v1/cases/c1/sightings/validate?step=1", headers=MEMBER, json=form)

        assert response.json()["errors"] == {"sighting_date": "Sighting cannot be in the future"}

    def test_submit_posts_once(self, client, fake_api):
        response = client.post("/api/v1/cases/c1/sightings", headers=MEMBER, json=SIGHTING_FORM)

        assert response.status_code == 201
        assert response.json()["outcome"]["navigate_to"] == "/missing-persons/c1"
        assert len(fake_api.calls("POST", "/sightings")) == 1

    def test_submit_stops_at_first_invalid_step(self, client, fake_api):
        form = dict(SIGHTING_FORM, city="")

        response = client.post("/api/v1/cases/c1/sightings", headers=MEMBER, json=form)

        assert response.status_code == 422
        assert response.json()["step"] == 2
        assert "city" in response.json()["outcome"]["errors"]
        assert fake_api.calls("POST") == []

    def test_submit_on_closed_case(self, client, fake_api):
        fake_api.cases["c1"]["status"] = "closed"

        response = client.post("/api/v1/cases/c1/sightings", headers=MEMBER, json=SIGHTING_FORM)

        assert response.status_code == 409
        assert fake_api.calls("POST") == []

    def test_submit_requires_login(self, client):
        response = client.post("/api/v1/cases/c1/sightings", json=SIGHTING_FORM)
        assert response.status_code == 403

    def test_submit_api_failure_is_retryable(self, client, fake_api):
        fake_api.fail_once("POST", "/sightings", 500)

        response = client.post("/api/v1/cases/c1/sightings", headers=MEMBER, json=SIGHTING_FORM)

        assert response.status_code == 502
        assert response.json()["step"] == 4
        assert response.json()["outcome"]["retryable"] is True


@pytest.mark.unit
class TestAdminRoutes:

    def test_dashboard_requires_admin(self, client):
        response = client.get("/api/v1/admin/dashboard", headers=MEMBER)

        assert response.status_code == 403
        assert response.json()["detail"]["navigate_to"] == "/dashboard"

    def test_dashboard(self, client, fake_api, case_factory):
        fake_api.add_case(case_factory("c2", status="found", isVerified=True))

        response = client.get("/api/v1/admin/dashboard?status=found", headers=ADMIN)

        assert response.status_code == 200
        body = response.json()
        assert body["stats"]["total_cases"] == 2
        assert [c["id"] for c in body["cases"]] == ["c2"]
        assert [c["id"] for c in body["verification_queue"]] == ["c1"]

    def test_unknown_status_filter(self, client):
        assert client.get("/api/v1/admin/dashboard?status=lost", headers=ADMIN).status_code == 400

    def test_verify_from_dashboard(self, client, fake_api):
        response = client.post("/api/v1/admin/cases/c1/verify", headers=ADMIN)

        assert response.status_code == 200
        assert fake_api.cases["c1"]["isVerified"] is True

    def test_verify_from_dashboard_when_reload_fails(self, client, fake_api):
        fake_api.fail_once("GET", "/missing-persons", 503, {"message": "down"}, after=1)

        response = client.post("/api/v1/admin/cases/c1/verify", headers=ADMIN)

        assert response.status_code == 200
        assert response.json()["notice"]["level"] == "warning"
        assert fake_api.cases["c1"]["isVerified"] is True
