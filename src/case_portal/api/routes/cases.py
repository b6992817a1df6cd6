"""
Case API Routes

Case detail view and the role-gated actions on a case.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from case_portal.api.dependencies import get_viewer, outcome_response
from case_portal.core.action_resolver import ActionResolver, available_actions
from case_portal.core.case_state import (
    can_submit_sighting,
    derived_status_label,
    priority_label,
)
from case_portal.core.case_view import CaseView
from case_portal.infrastructure.api.client import MissingPersonsClient, get_api_client
from case_portal.models import (
    CaseViewResponse,
    MarkFoundRequest,
    NotFoundResponse,
    Viewer,
)

router = APIRouter(prefix="/api/v1/cases", tags=["cases"])
logger = logging.getLogger(__name__)


# Dependency for Action Resolver
def get_action_resolver(client: MissingPersonsClient = Depends(get_api_client)) -> ActionResolver:
    """Dependency for getting ActionResolver instance"""
    return ActionResolver(client)


async def load_case_view(case_id: str, client: MissingPersonsClient) -> CaseView:
    """
    Load a case view or raise the matching HTTP error

    Raises:
        HTTPException: 404 if the case does not exist, 502 if it could not be loaded
    """
    view = CaseView(client, case_id)
    await view.load()

    if view.not_found:
        raise HTTPException(status_code=404, detail=NotFoundResponse().model_dump())
    if not view.loaded:
        raise HTTPException(status_code=502, detail=view.notice.message if view.notice else "Error loading case")
    return view


@router.get(
    "/{case_id}",
    response_model=CaseViewResponse,
    summary="Get Case View",
    description="""
Returns a case as seen by the requesting viewer.

**Workflow**:
1. Fetches the case and its sightings from the missing-persons API
2. Derives status and priority labels
3. Orders sightings oldest-first with a display index; anonymous reporters are hidden
4. Computes the actions available to the viewer

**Authorization**: Optional X-User-ID / X-User-Role headers from API Gateway
    """,
    responses={
        200: {"description": "Case view returned successfully"},
        401: {"description": "Unknown role header"},
        404: {"description": "Case not found"},
        502: {"description": "Missing-persons API unavailable"}
    }
)
async def get_case_view(
    case_id: str,
    viewer: Viewer = Depends(get_viewer),
    client: MissingPersonsClient = Depends(get_api_client)
) -> CaseViewResponse:
    """Get case detail view"""
    view = await load_case_view(case_id, client)
    case = view.case

    return CaseViewResponse(
        case=case,
        status_label=derived_status_label(case),
        priority_label=priority_label(case),
        can_submit_sighting=can_submit_sighting(case),
        actions=available_actions(viewer, case),
        sightings=view.display_sightings,
    )


@router.post(
    "/{case_id}/report-sighting",
    summary="Enter Sighting Wizard",
    description="Checks the case is still active and returns the wizard route to navigate to.",
    responses={
        200: {"description": "Viewer may open the sighting wizard"},
        403: {"description": "Viewer is not logged in"},
        409: {"description": "Case is no longer active"}
    }
)
async def report_sighting(
    case_id: str,
    viewer: Viewer = Depends(get_viewer),
    client: MissingPersonsClient = Depends(get_api_client),
    resolver: ActionResolver = Depends(get_action_resolver)
) -> JSONResponse:
    """Enter the sighting wizard"""
    view = await load_case_view(case_id, client)
    return outcome_response(await resolver.report_sighting(viewer, view.case))


@router.post(
    "/{case_id}/verify",
    summary="Verify Case",
    description="Marks an unverified case as verified. Admins and moderators only.",
    responses={
        200: {"description": "Case verified"},
        403: {"description": "Admin privileges required"},
        409: {"description": "Case is already verified"},
        502: {"description": "Missing-persons API unavailable"}
    }
)
async def verify_case(
    case_id: str,
    viewer: Viewer = Depends(get_viewer),
    client: MissingPersonsClient = Depends(get_api_client),
    resolver: ActionResolver = Depends(get_action_resolver)
) -> JSONResponse:
    """Verify a case"""
    view = await load_case_view(case_id, client)
    outcome = await resolver.verify(viewer, view.case, refresh=view.refresh)
    return outcome_response(outcome)


@router.post(
    "/{case_id}/found",
    summary="Mark Case As Found",
    description="""
Transitions an active case to found.

**Request Body**: `{"foundLocation": "...", "notes": "..."}` (foundLocation required)

**Authorization**: Case owner, admin or moderator
    """,
    responses={
        200: {"description": "Case marked as found"},
        403: {"description": "Viewer may not modify this case"},
        409: {"description": "Case is no longer active"},
        422: {"description": "Found location missing"}
    }
)
async def mark_found(
    case_id: str,
    request: MarkFoundRequest,
    viewer: Viewer = Depends(get_viewer),
    client: MissingPersonsClient = Depends(get_api_client),
    resolver: ActionResolver = Depends(get_action_resolver)
) -> JSONResponse:
    """Mark a case as found"""
    view = await load_case_view(case_id, client)
    outcome = await resolver.mark_found(
        viewer,
        view.case,
        found_location=request.found_location,
        notes=request.notes,
        refresh=view.refresh
    )
    return outcome_response(outcome)


@router.delete(
    "/{case_id}",
    summary="Delete Case",
    description="""
Deletes a case. Irreversible.

**Confirmation**: `confirm=true` must be passed; without it nothing is deleted.

**Authorization**: Case owner, admin or moderator
    """,
    responses={
        200: {"description": "Case deleted"},
        403: {"description": "Viewer may not modify this case"},
        409: {"description": "Deletion not confirmed"}
    }
)
async def delete_case(
    case_id: str,
    confirm: bool = Query(False, description="Explicit confirmation of the deletion"),
    viewer: Viewer = Depends(get_viewer),
    client: MissingPersonsClient = Depends(get_api_client),
    resolver: ActionResolver = Depends(get_action_resolver)
) -> JSONResponse:
    """Delete a case"""
    view = await load_case_view(case_id, client)
    outcome = await resolver.delete(viewer, view.case, confirmed=confirm)
    return outcome_response(outcome)


@router.get(
    "/{case_id}/edit",
    summary="Enter Edit Flow",
    responses={
        200: {"description": "Viewer may edit the case"},
        403: {"description": "Viewer may not modify this case"}
    }
)
async def edit_case(
    case_id: str,
    viewer: Viewer = Depends(get_viewer),
    client: MissingPersonsClient = Depends(get_api_client),
    resolver: ActionResolver = Depends(get_action_resolver)
) -> JSONResponse:
    """Navigate to the edit flow"""
    view = await load_case_view(case_id, client)
    return outcome_response(resolver.edit(viewer, view.case))
