"""Remote missing-persons API infrastructure."""

from case_portal.infrastructure.api.client import (
    ApiError,
    CaseDetail,
    CaseNotFoundError,
    MalformedResponseError,
    MissingPersonsClient,
    api_client,
    get_api_client,
)

__all__ = [
    "ApiError",
    "CaseDetail",
    "CaseNotFoundError",
    "MalformedResponseError",
    "MissingPersonsClient",
    "api_client",
    "get_api_client",
]
