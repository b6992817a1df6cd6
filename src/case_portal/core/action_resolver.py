"""
Role-Gated Action Resolver

Computes which mutating actions a viewer may take on a case and performs them
through the remote API. A failed precondition never reaches the API.
"""

import logging
from typing import Awaitable, Callable, List, Optional

from case_portal.core.case_state import (
    can_modify,
    can_submit_sighting,
    case_detail_path,
    is_admin,
)
from case_portal.core.errors import ForbiddenError, PreconditionError
from case_portal.infrastructure.api.client import ApiError, CaseNotFoundError, MissingPersonsClient
from case_portal.models.case import Case, CaseAction, CaseStatus
from case_portal.models.outcomes import ActionOutcome, Notice, NoticeLevel, OutcomeKind
from case_portal.models.user import Viewer

logger = logging.getLogger(__name__)

CASE_LIST_PATH = "/missing-persons"
INACTIVE_CASE_MESSAGE = "This case is no longer active"

Refresh = Callable[[], Awaitable[object]]


def available_actions(viewer: Viewer, case: Case) -> List[CaseAction]:
    """
    Actions the viewer may take on the case, in display order

    Args:
        viewer: Viewer looking at the case
        case: Loaded case record

    Returns:
        Subset of CaseAction
    """
    actions = []
    if viewer.is_authenticated and can_submit_sighting(case):
        actions.append(CaseAction.REPORT_SIGHTING)
    if is_admin(viewer) and not case.is_verified:
        actions.append(CaseAction.VERIFY)
    if can_modify(viewer, case):
        actions.append(CaseAction.DELETE)
        if case.status == CaseStatus.ACTIVE:
            actions.append(CaseAction.MARK_FOUND)
        actions.append(CaseAction.EDIT)
    return actions


def _api_failure(error: ApiError, fallback: str) -> ActionOutcome:
    return ActionOutcome.failed(
        OutcomeKind.API_ERROR,
        error.server_message or fallback,
        retryable=error.retryable,
    )


async def _settle(outcome: ActionOutcome, refresh: Optional[Refresh], reload_warning: str) -> ActionOutcome:
    """
    Refetch after a mutation the API already applied

    A failed refetch does not undo the mutation: the outcome stays OK and its
    notice becomes a warning.
    """
    if refresh is None:
        return outcome
    try:
        await refresh()
    except ApiError as e:
        logger.warning(f"Reload after mutation failed: {e.message}")
        outcome.notice = Notice(level=NoticeLevel.WARNING, message=reload_warning)
    return outcome


class ActionResolver:
    """Performs role-gated actions on a case"""

    def __init__(self, client: MissingPersonsClient):
        self.client = client

    async def report_sighting(self, viewer: Viewer, case: Case) -> ActionOutcome:
        """
        Enter the sighting wizard for a case

        The case is refetched first so a case that stopped being active since
        the page loaded is caught here rather than at submission.
        """
        try:
            if not viewer.is_authenticated:
                raise ForbiddenError("Please log in to report a sighting", navigate_to="/login")
            current = (await self.client.get_case(case.id)).case
            if not can_submit_sighting(current):
                raise PreconditionError(INACTIVE_CASE_MESSAGE, navigate_to=case_detail_path(case.id))
        except PreconditionError as e:
            logger.warning(f"Report sighting blocked for case {case.id}: {e.message}")
            return e.to_outcome()
        except CaseNotFoundError:
            return ActionOutcome.failed(
                OutcomeKind.NOT_FOUND,
                "Error loading missing person details",
                navigate_to=CASE_LIST_PATH,
            )
        except ApiError as e:
            return _api_failure(e, "Error loading missing person details")

        return ActionOutcome(navigate_to=f"/report-sighting/{case.id}")

    async def verify(self, viewer: Viewer, case: Case, refresh: Optional[Refresh] = None) -> ActionOutcome:
        """Mark a case as verified (admins and moderators only)"""
        try:
            if not is_admin(viewer):
                raise ForbiddenError("Admin privileges required")
            if case.is_verified:
                raise PreconditionError("Case is already verified", level=NoticeLevel.INFO)
        except PreconditionError as e:
            logger.warning(f"Verify blocked for case {case.id}: {e.message}")
            return e.to_outcome()

        try:
            await self.client.verify_case(case.id)
        except ApiError as e:
            return _api_failure(e, "Error verifying case")

        logger.info(f"User {viewer.user_id} verified case {case.id}")
        return await _settle(
            ActionOutcome.ok("Case verified successfully"),
            refresh,
            "Case verified, but the latest data could not be loaded",
        )

    async def delete(
        self,
        viewer: Viewer,
        case: Case,
        confirmed: bool = False,
        return_to: Optional[str] = CASE_LIST_PATH,
        refresh: Optional[Refresh] = None,
    ) -> ActionOutcome:
        """
        Delete a case (owner or admin), only after explicit confirmation

        Args:
            viewer: Acting viewer
            case: Case to delete
            confirmed: The user confirmed the irreversible deletion
            return_to: Where to navigate on success
            refresh: Called after a successful delete (e.g. reload a list)
        """
        try:
            if not can_modify(viewer, case):
                raise ForbiddenError()
            if not confirmed:
                raise PreconditionError(
                    "Are you sure you want to delete this report? This action cannot be undone."
                )
        except PreconditionError as e:
            return e.to_outcome()

        try:
            await self.client.delete_case(case.id)
        except ApiError as e:
            return _api_failure(e, "Error deleting report")

        logger.info(f"User {viewer.user_id} deleted case {case.id}")
        return await _settle(
            ActionOutcome.ok("Report deleted successfully", navigate_to=return_to),
            refresh,
            "Report deleted, but the latest data could not be loaded",
        )

    async def mark_found(
        self,
        viewer: Viewer,
        case: Case,
        found_location: str,
        notes: Optional[str] = None,
        refresh: Optional[Refresh] = None,
    ) -> ActionOutcome:
        """
        Transition an active case to found

        A blank found location is a local validation error: nothing is sent
        and the modal stays open.
        """
        try:
            if not can_modify(viewer, case):
                raise ForbiddenError()
            if case.status != CaseStatus.ACTIVE:
                raise PreconditionError(INACTIVE_CASE_MESSAGE, navigate_to=case_detail_path(case.id))
        except PreconditionError as e:
            return e.to_outcome()

        found_location = (found_location or "").strip()
        if not found_location:
            return ActionOutcome.failed(
                OutcomeKind.VALIDATION,
                errors={"found_location": "Found location is required"},
            )

        try:
            await self.client.mark_found(case.id, found_location, (notes or "").strip() or None)
        except ApiError as e:
            return _api_failure(e, "Error updating status")

        logger.info(f"User {viewer.user_id} marked case {case.id} as found")
        return await _settle(
            ActionOutcome.ok("Person marked as found successfully!"),
            refresh,
            "Person marked as found, but the latest data could not be loaded",
        )

    def edit(self, viewer: Viewer, case: Case) -> ActionOutcome:
        """Open the edit flow"""
        if not can_modify(viewer, case):
            return ForbiddenError().to_outcome()
        return ActionOutcome(navigate_to=f"/edit-report/{case.id}")
