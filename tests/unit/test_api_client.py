"""Unit tests for the missing-persons API client"""

import httpx
import pytest

from case_portal.infrastructure.api.client import (
    ApiError,
    CaseNotFoundError,
    MalformedResponseError,
    MissingPersonsClient,
)
from case_portal.models import CaseStatus


@pytest.mark.unit
class TestMissingPersonsClient:

    @pytest.mark.asyncio
    async def test_get_case_with_sightings(self, fake_api, api_client, case_factory, sighting_factory):
        fake_api.add_case(case_factory("c2"), [sighting_factory("s1", "c2"), sighting_factory("s2", "c2")])

        detail = await api_client.get_case("c2")

        assert detail.case.id == "c2"
        assert [s.id for s in detail.sightings] == ["s1", "s2"]
        assert fake_api.calls("GET") == [("GET", "/missing-persons/c2", None)]

    @pytest.mark.asyncio
    async def test_unknown_case_raises_not_found(self, api_client):
        with pytest.raises(CaseNotFoundError) as exc_info:
            await api_client.get_case("nope")

        assert not exc_info.value.retryable
        assert exc_info.value.server_message == "Missing person not found"

    @pytest.mark.asyncio
    async def test_malformed_case_fails_fast(self, fake_api, api_client, case_factory):
        fake_api.add_case(case_factory("bad", status="missing"))

        with pytest.raises(MalformedResponseError):
            await api_client.get_case("bad")

    @pytest.mark.asyncio
    async def test_server_error_is_retryable_with_server_message(self, fake_api, api_client):
        fake_api.fail_once("PUT", "/missing-persons/c1", 503, {"message": "Database unavailable"})

        with pytest.raises(ApiError) as exc_info:
            await api_client.verify_case("c1")

        assert exc_info.value.retryable
        assert exc_info.value.status_code == 503
        assert exc_info.value.server_message == "Database unavailable"

    @pytest.mark.asyncio
    async def test_client_error_is_not_retryable(self, fake_api, api_client):
        fake_api.fail_once("POST", "/sightings", 400, {})

        with pytest.raises(ApiError) as exc_info:
            await api_client.create_sighting({"missingPerson": "c1"})

        assert not exc_info.value.retryable
        assert exc_info.value.server_message is None

    @pytest.mark.asyncio
    async def test_transport_failure_is_retryable(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = MissingPersonsClient(
            http=httpx.AsyncClient(transport=httpx.MockTransport(refuse), base_url="http://api.test/api")
        )

        with pytest.raises(ApiError) as exc_info:
            await client.get_case("c1")

        assert exc_info.value.retryable

    @pytest.mark.asyncio
    async def test_mark_found_sends_location_and_notes(self, fake_api, api_client):
        case = await api_client.mark_found("c1", "Merkato bus station", notes="With relatives")

        assert case.status == CaseStatus.FOUND
        assert fake_api.calls("PUT") == [
            ("PUT", "/missing-persons/c1/found", {"foundLocation": "Merkato bus station", "notes": "With relatives"})
        ]

    @pytest.mark.asyncio
    async def test_mark_found_omits_empty_notes(self, fake_api, api_client):
        await api_client.mark_found("c1", "Merkato bus station")

        assert fake_api.calls("PUT")[0][2] == {"foundLocation": "Merkato bus station"}

    @pytest.mark.asyncio
    async def test_list_cases_passes_limit(self, fake_api, api_client, case_factory):
        for i in range(3):
            fake_api.add_case(case_factory(f"x{i}"))

        cases = await api_client.list_cases(limit=2)

        assert len(cases) == 2

    @pytest.mark.asyncio
    async def test_uninitialized_client_raises(self):
        with pytest.raises(RuntimeError):
            await MissingPersonsClient().get_case("c1")

    @pytest.mark.asyncio
    async def test_health_check(self, api_client):
        assert await api_client.health_check()
        assert not await MissingPersonsClient().health_check()
