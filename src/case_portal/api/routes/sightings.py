"""
Sighting API Routes

Step validation and submission of the sighting wizard for a case.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from case_portal.api.dependencies import api_error_to_http, get_viewer, outcome_status
from case_portal.core.errors import PreconditionError
from case_portal.core.sighting_wizard import SightingWizard, WizardStep
from case_portal.infrastructure.api.client import (
    ApiError,
    CaseNotFoundError,
    MissingPersonsClient,
    get_api_client,
)
from case_portal.models import (
    ActionOutcome,
    NotFoundResponse,
    OutcomeKind,
    SightingForm,
    SightingSubmitResponse,
    StepValidationResponse,
    Viewer,
)

router = APIRouter(prefix="/api/v1/cases/{case_id}/sightings", tags=["sightings"])
logger = logging.getLogger(__name__)


async def open_wizard(case_id: str, viewer: Viewer, client: MissingPersonsClient) -> SightingWizard:
    """
    Open the wizard for a case, enforcing the active-case entry guard

    Raises:
        HTTPException: 404 for an unknown case, 403/409 when entry is refused,
            502/400 when the case could not be loaded
    """
    try:
        return await SightingWizard.open(client, case_id, viewer)
    except CaseNotFoundError:
        raise HTTPException(status_code=404, detail=NotFoundResponse().model_dump())
    except PreconditionError as e:
        outcome = e.to_outcome()
        raise HTTPException(status_code=outcome_status(outcome), detail=outcome.model_dump(mode="json"))
    except ApiError as e:
        raise api_error_to_http(e, "Error loading missing person details")


@router.post(
    "/validate",
    response_model=StepValidationResponse,
    summary="Validate Wizard Step",
    description="""
Validates one step of the sighting wizard against the submitted form.

**Steps**:
1. When: date and time required, not in the future
2. Where: city and specific location required
3. Details: description of at least 20 characters; companions described when not alone
4. Submit: no blocking checks unless contact results are required by configuration;
   the response also carries the review summary

**Authorization**: Requires X-User-ID header; the case must be active
    """,
    responses={
        200: {"description": "Validation result returned"},
        403: {"description": "Viewer is not logged in"},
        404: {"description": "Case not found"},
        409: {"description": "Case is no longer active"}
    }
)
async def validate_step(
    case_id: str,
    form: SightingForm,
    step: int = Query(..., ge=1, le=4, description="Wizard step to validate"),
    viewer: Viewer = Depends(get_viewer),
    client: MissingPersonsClient = Depends(get_api_client)
) -> StepValidationResponse:
    """Validate one wizard step"""
    wizard = await open_wizard(case_id, viewer, client)
    wizard.form = form
    valid = wizard.validate_step(step)
    summary = wizard.review_summary() if step == WizardStep.SUBMIT else None

    return StepValidationResponse(step=step, valid=valid, errors=wizard.errors, summary=summary)


@router.post(
    "",
    response_model=SightingSubmitResponse,
    status_code=201,
    summary="Submit Sighting",
    description="""
Runs the sighting wizard on a complete form and submits it.

**Workflow**:
1. Opens the wizard (case must exist and be active)
2. Walks When -> Where -> Details -> Submit, stopping at the first invalid step
3. Re-checks that the case is still active
4. Sends exactly one POST /sightings to the missing-persons API

**Response**: The step the wizard ended on and the outcome (notice, navigation target, field errors)

**Authorization**: Requires X-User-ID header
    """,
    responses={
        201: {"description": "Sighting submitted"},
        409: {"description": "Case is no longer active"},
        422: {"description": "A wizard step did not validate"},
        502: {"description": "Missing-persons API unavailable (retryable)"}
    }
)
async def submit_sighting(
    case_id: str,
    form: SightingForm,
    viewer: Viewer = Depends(get_viewer),
    client: MissingPersonsClient = Depends(get_api_client)
):
    """Submit a sighting"""
    wizard = await open_wizard(case_id, viewer, client)
    wizard.form = form

    while wizard.step != WizardStep.SUBMIT:
        if not wizard.next():
            logger.warning(f"Sighting for case {case_id} stopped at step {wizard.step.name}")
            outcome = ActionOutcome.failed(OutcomeKind.VALIDATION, errors=dict(wizard.errors))
            return _submit_response(wizard, outcome)

    try:
        outcome = await wizard.submit()
    except Exception as e:
        logger.error(f"Sighting submission failed for case {case_id}: {e}")
        raise HTTPException(status_code=500, detail="Submission failed")

    if outcome.success:
        logger.info(f"User {viewer.user_id} reported a sighting for case {case_id}")
    return _submit_response(wizard, outcome)


def _submit_response(wizard: SightingWizard, outcome: ActionOutcome) -> JSONResponse:
    body = SightingSubmitResponse(step=int(wizard.step), outcome=outcome)
    return JSONResponse(
        status_code=outcome_status(outcome, success_status=201),
        content=body.model_dump(mode="json"),
    )
