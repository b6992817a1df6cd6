"""
Missing-Persons API Client

Async HTTP client for the remote missing-persons REST API. Every response is
parsed against the Case/Sighting schemas before it reaches the core.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, Field, ValidationError

from case_portal.config.settings import settings
from case_portal.models.case import Case
from case_portal.models.sighting import Sighting

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."


class ApiError(Exception):
    """Failure talking to the remote API"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        retryable: bool = False,
        server_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.retryable = retryable
        # Message from the API body, when it sent one
        self.server_message = server_message


class CaseNotFoundError(ApiError):
    """The requested case does not exist (never retried)"""

    def __init__(self, message: str = "Case not found", server_message: Optional[str] = None):
        super().__init__(message, status_code=404, retryable=False, server_message=server_message)


class MalformedResponseError(ApiError):
    """The API answered with a record that does not match the schema"""

    def __init__(self, message: str):
        super().__init__(message, status_code=None, retryable=False)


class CaseDetail(BaseModel):
    """A case together with its embedded sightings"""

    case: Case
    sightings: List[Sighting] = Field(default_factory=list)


class MissingPersonsClient:
    """Client for /missing-persons and /sightings"""

    def __init__(self, http: Optional[httpx.AsyncClient] = None):
        self.http = http

    async def initialize(self):
        """Create the shared HTTP client"""
        if self.http is not None:
            return
        logger.info(f"Initializing API client: {settings.api_base_url}")
        self.http = httpx.AsyncClient(
            base_url=settings.api_base_url,
            timeout=settings.api_timeout_seconds,
        )

    async def close(self):
        """Close HTTP connections"""
        if self.http is not None:
            await self.http.aclose()
            self.http = None
            logger.info("API client closed")

    def _client(self) -> httpx.AsyncClient:
        if self.http is None:
            raise RuntimeError("API client not initialized. Call initialize() first.")
        return self.http

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Send a request and return the decoded JSON body

        Raises:
            CaseNotFoundError: On 404
            ApiError: On transport failures (retryable) or other error statuses
        """
        try:
            response = await self._client().request(method, path, json=json, params=params)
        except httpx.TransportError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise ApiError(GENERIC_ERROR_MESSAGE, retryable=True) from e

        body = _decode(response)

        if response.status_code == 404:
            raise CaseNotFoundError(body.get("message") or "Case not found", server_message=body.get("message"))

        if response.is_error:
            message = body.get("message") or GENERIC_ERROR_MESSAGE
            retryable = response.status_code >= 500 or response.status_code == 429
            logger.error(f"{method} {path} returned {response.status_code}: {message}")
            raise ApiError(
                message,
                status_code=response.status_code,
                retryable=retryable,
                server_message=body.get("message"),
            )

        return body

    async def get_case(self, case_id: str) -> CaseDetail:
        """
        Fetch a case and its sightings

        Args:
            case_id: Case ID

        Returns:
            CaseDetail

        Raises:
            CaseNotFoundError: If the case does not exist
            MalformedResponseError: If the record does not match the schema
        """
        body = await self._request("GET", f"/missing-persons/{case_id}")
        data = body.get("data")
        if not data:
            raise CaseNotFoundError()

        try:
            return CaseDetail(
                case=Case.model_validate(data),
                sightings=[Sighting.model_validate(s) for s in body.get("sightings") or []],
            )
        except ValidationError as e:
            logger.error(f"Malformed case record {case_id}: {e}")
            raise MalformedResponseError(f"Malformed case record: {case_id}") from e

    async def list_cases(self, limit: int = 100) -> List[Case]:
        """List cases, newest first as ordered by the API"""
        body = await self._request("GET", "/missing-persons", params={"limit": limit})
        try:
            return [Case.model_validate(c) for c in body.get("data") or []]
        except ValidationError as e:
            logger.error(f"Malformed case list: {e}")
            raise MalformedResponseError("Malformed case list") from e

    async def verify_case(self, case_id: str) -> Optional[Case]:
        """Set isVerified on a case"""
        body = await self._request("PUT", f"/missing-persons/{case_id}", json={"isVerified": True})
        return _optional_case(body)

    async def mark_found(self, case_id: str, found_location: str, notes: Optional[str] = None) -> Optional[Case]:
        """Transition a case to found"""
        payload: Dict[str, Any] = {"foundLocation": found_location}
        if notes:
            payload["notes"] = notes
        body = await self._request("PUT", f"/missing-persons/{case_id}/found", json=payload)
        return _optional_case(body)

    async def delete_case(self, case_id: str) -> None:
        await self._request("DELETE", f"/missing-persons/{case_id}")

    async def create_sighting(self, payload: Dict[str, Any]) -> Optional[Sighting]:
        """POST a sighting payload and return the created record when echoed back"""
        body = await self._request("POST", "/sightings", json=payload)
        data = body.get("data")
        if not data:
            return None
        try:
            return Sighting.model_validate(data)
        except ValidationError as e:
            logger.error(f"Malformed sighting record: {e}")
            raise MalformedResponseError("Malformed sighting record") from e

    async def health_check(self) -> bool:
        """Check the remote API is reachable"""
        try:
            response = await self._client().get("/health")
            return response.is_success
        except Exception as e:
            logger.error(f"API health check failed: {e}")
            return False


def _decode(response: httpx.Response) -> Dict[str, Any]:
    if not response.content:
        return {}
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _optional_case(body: Dict[str, Any]) -> Optional[Case]:
    data = body.get("data")
    if not data:
        return None
    try:
        return Case.model_validate(data)
    except ValidationError as e:
        raise MalformedResponseError("Malformed case record") from e


# Global API client instance
api_client = MissingPersonsClient()


def get_api_client() -> MissingPersonsClient:
    """Dependency for getting the API client"""
    return api_client
