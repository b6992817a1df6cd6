"""
Admin API Routes

Dashboard statistics, filtering and verification queue for admins and moderators.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from case_portal.api.dependencies import api_error_to_http, get_viewer, outcome_response, outcome_status
from case_portal.core.admin_dashboard import AdminDashboard
from case_portal.core.errors import ForbiddenError
from case_portal.infrastructure.api.client import ApiError, MissingPersonsClient, get_api_client
from case_portal.models import AdminDashboardResponse, CaseStatus, Viewer

router = APIRouter(prefix="/api/v1/admin", tags=["admin"])
logger = logging.getLogger(__name__)


async def load_dashboard(viewer: Viewer, client: MissingPersonsClient) -> AdminDashboard:
    """
    Open and load the dashboard for an admin viewer

    Raises:
        HTTPException: 403 for non-admins, 502/400 if the case list could not be loaded
    """
    try:
        dashboard = AdminDashboard(client, viewer)
    except ForbiddenError as e:
        outcome = e.to_outcome()
        raise HTTPException(status_code=outcome_status(outcome), detail=outcome.model_dump(mode="json"))

    try:
        await dashboard.load()
    except ApiError as e:
        raise api_error_to_http(e, "Error loading admin data")
    return dashboard


def _parse_status(status: Optional[str]) -> Optional[CaseStatus]:
    if status is None or status == "all":
        return None
    try:
        return CaseStatus(status)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown status filter: {status}")


@router.get(
    "/dashboard",
    response_model=AdminDashboardResponse,
    summary="Admin Dashboard",
    description="""
Returns case statistics, the filtered case list and the verification queue.

**Filters**:
- status: `all` (default), `active`, `found` or `closed`
- q: case-insensitive match on "first last" name or case number

**Authorization**: X-User-Role must be admin or moderator
    """,
    responses={
        200: {"description": "Dashboard returned"},
        400: {"description": "Unknown status filter"},
        403: {"description": "Admin privileges required"}
    }
)
async def get_dashboard(
    status: Optional[str] = Query("all", description="Status filter"),
    q: str = Query("", description="Search by name or case number"),
    viewer: Viewer = Depends(get_viewer),
    client: MissingPersonsClient = Depends(get_api_client)
) -> AdminDashboardResponse:
    """Get admin dashboard"""
    status_filter = _parse_status(status)
    dashboard = await load_dashboard(viewer, client)
    return dashboard.view(status_filter, q)


@router.post(
    "/cases/{case_id}/verify",
    summary="Verify Case From Dashboard",
    responses={
        200: {"description": "Case verified"},
        403: {"description": "Admin privileges required"},
        404: {"description": "Case not in the dashboard"}
    }
)
async def verify_from_dashboard(
    case_id: str,
    viewer: Viewer = Depends(get_viewer),
    client: MissingPersonsClient = Depends(get_api_client)
) -> JSONResponse:
    """Verify a case from the verification queue"""
    dashboard = await load_dashboard(viewer, client)
    return outcome_response(await dashboard.verify(case_id))


@router.delete(
    "/cases/{case_id}",
    summary="Delete Case From Dashboard",
    responses={
        200: {"description": "Case deleted"},
        403: {"description": "Admin privileges required"},
        409: {"description": "Deletion not confirmed"}
    }
)
async def delete_from_dashboard(
    case_id: str,
    confirm: bool = Query(False, description="Explicit confirmation of the deletion"),
    viewer: Viewer = Depends(get_viewer),
    client: MissingPersonsClient = Depends(get_api_client)
) -> JSONResponse:
    """Delete a case from the dashboard"""
    dashboard = await load_dashboard(viewer, client)
    return outcome_response(await dashboard.delete(case_id, confirmed=confirm))
