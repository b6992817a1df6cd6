"""Shared fixtures: an in-memory stand-in for the missing-persons API."""

import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

from case_portal.infrastructure.api.client import MissingPersonsClient
from case_portal.models import Role, Viewer

BASE_URL = "http://api.test/api"
# 12:00 in Addis Ababa
FIXED_NOW = datetime(2024, 6, 1, 9, 0, tzinfo=timezone.utc)


def make_case(case_id: str = "c1", **overrides: Any) -> Dict[str, Any]:
    """Case record in the API's wire format"""
    record = {
        "_id": case_id,
        "caseNumber": f"MP-2024-{case_id.upper()}",
        "status": "active",
        "isVerified": False,
        "priority": "high",
        "reportedBy": {"_id": "owner-1", "firstName": "Abebe", "lastName": "Kebede"},
        "views": 10,
        "sightingsCount": 0,
        "personalInfo": {"firstName": "Sara", "lastName": "Tadesse", "age": 14, "gender": "female"},
        "lastSeenInfo": {"date": "2024-01-01", "location": {"city": "Addis Ababa"}},
        "createdAt": "2024-01-02T08:00:00Z",
    }
    record.update(overrides)
    return record


def make_sighting(sighting_id: str, case_id: str = "c1", **overrides: Any) -> Dict[str, Any]:
    record = {
        "_id": sighting_id,
        "missingPerson": case_id,
        "sightingInfo": {
            "date": "2024-01-03",
            "time": "09:30",
            "location": {"city": "Addis Ababa", "specificLocation": "Piassa"},
            "description": "Seen buying bread at a kiosk near the church",
            "personCondition": "appeared_well",
            "wasAlone": True,
        },
        "status": "unverified",
        "isAnonymous": False,
        "reportedBy": {"_id": "u-9", "firstName": "Hana", "lastName": "Girma"},
        "createdAt": "2024-01-03T10:00:00Z",
    }
    record.update(overrides)
    return record


class FakeMissingPersonsApi:
    """Serves /missing-persons and /sightings from dicts and records every call"""

    def __init__(self):
        self.cases: Dict[str, Dict[str, Any]] = {}
        self.sightings: Dict[str, List[Dict[str, Any]]] = {}
        self.requests: List[Tuple[str, str, Optional[Dict[str, Any]]]] = []
        # (method, path) -> [status, body, matching calls to let through first]
        self.failures: Dict[Tuple[str, str], List[Any]] = {}

    def add_case(self, record: Dict[str, Any], sightings: Optional[List[Dict[str, Any]]] = None):
        self.cases[record["_id"]] = record
        self.sightings[record["_id"]] = list(sightings or [])
        return record

    def fail_once(
        self, method: str, path: str, status: int, body: Optional[Dict[str, Any]] = None, after: int = 0
    ):
        self.failures[(method, path)] = [status, body or {}, after]

    def calls(self, method: str, path: Optional[str] = None):
        return [
            (m, p, body) for m, p, body in self.requests
            if m == method and (path is None or p == path)
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path[len("/api"):]
        body = json.loads(request.content) if request.content else None
        self.requests.append((request.method, path, body))

        failure = self.failures.get((request.method, path))
        if failure is not None:
            if failure[2] > 0:
                failure[2] -= 1
            else:
                del self.failures[(request.method, path)]
                return httpx.Response(failure[0], json=failure[1])

        parts = [p for p in path.split("/") if p]

        if parts == ["health"]:
            return httpx.Response(200, json={"status": "ok"})

        if parts == ["sightings"] and request.method == "POST":
            case_id = body["missingPerson"]
            created = {"_id": f"s-{len(self.sightings.get(case_id, [])) + 1}", **body, "status": "unverified"}
            self.sightings.setdefault(case_id, []).append(created)
            return httpx.Response(201, json={"success": True, "data": created})

        if parts == ["missing-persons"] and request.method == "GET":
            limit = int(request.url.params.get("limit", "100"))
            return httpx.Response(200, json={"success": True, "data": list(self.cases.values())[:limit]})

        if parts[:1] == ["missing-persons"] and len(parts) >= 2:
            case = self.cases.get(parts[1])
            if case is None:
                return httpx.Response(404, json={"success": False, "message": "Missing person not found"})

            if len(parts) == 2 and request.method == "GET":
                return httpx.Response(
                    200,
                    json={"success": True, "data": case, "sightings": self.sightings.get(parts[1], [])},
                )
            if len(parts) == 2 and request.method == "PUT":
                case.update(body or {})
                return httpx.Response(200, json={"success": True, "data": case})
            if len(parts) == 2 and request.method == "DELETE":
                del self.cases[parts[1]]
                return httpx.Response(200, json={"success": True, "message": "Deleted"})
            if parts[2:] == ["found"] and request.method == "PUT":
                case["status"] = "found"
                case["foundInfo"] = body
                return httpx.Response(200, json={"success": True, "data": case})

        return httpx.Response(405, json={"message": f"Unhandled {request.method} {path}"})


@pytest.fixture
def fake_api() -> FakeMissingPersonsApi:
    api = FakeMissingPersonsApi()
    api.add_case(make_case("c1"))
    return api


@pytest.fixture
def api_client(fake_api) -> MissingPersonsClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(fake_api.handler), base_url=BASE_URL)
    return MissingPersonsClient(http=http)


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def anonymous() -> Viewer:
    return Viewer.anonymous()


@pytest.fixture
def member() -> Viewer:
    return Viewer(user_id="member-7", role=Role.USER)


@pytest.fixture
def owner() -> Viewer:
    return Viewer(user_id="owner-1", role=Role.USER)


@pytest.fixture
def admin() -> Viewer:
    return Viewer(user_id="admin-1", role=Role.ADMIN)


@pytest.fixture
def moderator() -> Viewer:
    return Viewer(user_id="mod-1", role=Role.MODERATOR)


@pytest.fixture
def case_factory():
    return make_case


@pytest.fixture
def sighting_factory():
    return make_sighting
