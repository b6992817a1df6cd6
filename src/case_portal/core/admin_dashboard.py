"""
Admin Dashboard

Case list, statistics and verification queue for admins and moderators.
"""

import logging
from typing import List, Optional

from case_portal.config.settings import settings
from case_portal.core.action_resolver import ActionResolver
from case_portal.core.case_state import is_admin
from case_portal.core.errors import ForbiddenError
from case_portal.infrastructure.api.client import MissingPersonsClient
from case_portal.models.case import Case, CaseStatus
from case_portal.models.outcomes import ActionOutcome, NoticeLevel, OutcomeKind
from case_portal.models.requests import AdminDashboardResponse, DashboardStats
from case_portal.models.user import Viewer

logger = logging.getLogger(__name__)

ACCESS_DENIED_MESSAGE = "Access denied. Admin privileges required."


def compute_stats(cases: List[Case]) -> DashboardStats:
    return DashboardStats(
        total_cases=len(cases),
        active_cases=sum(1 for c in cases if c.status == CaseStatus.ACTIVE),
        resolved_cases=sum(1 for c in cases if c.status == CaseStatus.FOUND),
        total_sightings=sum(c.sightings_count for c in cases),
        pending_verifications=sum(1 for c in cases if not c.is_verified),
    )


def filter_cases(cases: List[Case], status: Optional[CaseStatus] = None, query: str = "") -> List[Case]:
    """
    Filter by status and by a case-insensitive match on name or case number

    Args:
        cases: Loaded cases
        status: Keep only this status (None keeps all)
        query: Text matched against "first last" and the case number
    """
    query = (query or "").strip().lower()
    result = []
    for case in cases:
        if status is not None and case.status != status:
            continue
        if query:
            name = f"{case.personal_info.first_name} {case.personal_info.last_name}".lower()
            number = (case.case_number or "").lower()
            if query not in name and query not in number:
                continue
        result.append(case)
    return result


class AdminDashboard:
    """Admin view over all cases"""

    def __init__(self, client: MissingPersonsClient, viewer: Viewer):
        if not is_admin(viewer):
            raise ForbiddenError(ACCESS_DENIED_MESSAGE, navigate_to="/dashboard")
        self.client = client
        self.viewer = viewer
        self.resolver = ActionResolver(client)
        self.cases: List[Case] = []
        self.loading = False

    async def load(self) -> List[Case]:
        """
        Load up to settings.admin_case_limit cases

        Raises:
            ApiError: If the case list could not be loaded
        """
        self.loading = True
        try:
            self.cases = await self.client.list_cases(limit=settings.admin_case_limit)
        finally:
            self.loading = False
        logger.info(f"Admin dashboard loaded {len(self.cases)} cases for {self.viewer.user_id}")
        return self.cases

    @property
    def stats(self) -> DashboardStats:
        return compute_stats(self.cases)

    @property
    def verification_queue(self) -> List[Case]:
        return [c for c in self.cases if not c.is_verified]

    def find(self, case_id: str) -> Optional[Case]:
        return next((c for c in self.cases if c.id == case_id), None)

    async def verify(self, case_id: str) -> ActionOutcome:
        case = self.find(case_id)
        if case is None:
            return _missing(case_id)
        return await self.resolver.verify(self.viewer, case, refresh=self.load)

    async def delete(self, case_id: str, confirmed: bool = False) -> ActionOutcome:
        case = self.find(case_id)
        if case is None:
            return _missing(case_id)
        outcome = await self.resolver.delete(
            self.viewer, case, confirmed=confirmed, return_to=None, refresh=self.load
        )
        if outcome.success and outcome.notice is not None and outcome.notice.level == NoticeLevel.SUCCESS:
            outcome.notice.message = "Case deleted successfully"
        return outcome

    def view(self, status: Optional[CaseStatus] = None, query: str = "") -> AdminDashboardResponse:
        return AdminDashboardResponse(
            stats=self.stats,
            status_filter=status,
            query=query,
            cases=filter_cases(self.cases, status, query),
            verification_queue=self.verification_queue,
        )


def _missing(case_id: str) -> ActionOutcome:
    return ActionOutcome.failed(OutcomeKind.NOT_FOUND, f"Case not found: {case_id}")
