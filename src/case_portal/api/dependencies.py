"""
Shared API dependencies

Viewer extraction from gateway headers and outcome-to-response mapping.
"""

import logging
from typing import Optional

from fastapi import Header, HTTPException
from fastapi.responses import JSONResponse

from case_portal.infrastructure.api.client import ApiError
from case_portal.models.outcomes import ActionOutcome, OutcomeKind
from case_portal.models.user import UnknownRoleError, Viewer

logger = logging.getLogger(__name__)

OUTCOME_STATUS = {
    OutcomeKind.VALIDATION: 422,
    OutcomeKind.PRECONDITION: 409,
    OutcomeKind.FORBIDDEN: 403,
    OutcomeKind.NOT_FOUND: 404,
}


def get_viewer(
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
    x_user_role: Optional[str] = Header(None, alias="X-User-Role"),
) -> Viewer:
    """Dependency building the viewer from API Gateway headers"""
    try:
        return Viewer.from_headers(x_user_id, x_user_role)
    except UnknownRoleError as e:
        logger.warning(f"Rejected viewer {x_user_id}: {e}")
        raise HTTPException(status_code=401, detail=str(e))


def outcome_status(outcome: ActionOutcome, success_status: int = 200) -> int:
    if outcome.kind == OutcomeKind.OK:
        return success_status
    if outcome.kind == OutcomeKind.API_ERROR:
        return 502 if outcome.retryable else 400
    return OUTCOME_STATUS[outcome.kind]


def outcome_response(outcome: ActionOutcome, success_status: int = 200) -> JSONResponse:
    """Render an action outcome with a matching status code"""
    return JSONResponse(
        status_code=outcome_status(outcome, success_status),
        content=outcome.model_dump(mode="json"),
    )


def api_error_to_http(error: ApiError, fallback: str) -> HTTPException:
    """Convert a client failure that escaped the core into an HTTP error"""
    status_code = 502 if error.retryable else 400
    return HTTPException(status_code=status_code, detail=error.server_message or fallback)
