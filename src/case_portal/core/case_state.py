"""
Case State Model

Pure functions over case records: status display, the active-only sighting
gate and viewer ownership/role checks. Nothing here talks to the API.
"""

from typing import Iterable, List

from case_portal.models.case import Case, CaseStatus
from case_portal.models.requests import DisplaySighting
from case_portal.models.sighting import Sighting
from case_portal.models.user import ADMIN_ROLES, Viewer


def can_submit_sighting(case: Case) -> bool:
    """Sightings may only be filed against active cases"""
    return case.status == CaseStatus.ACTIVE


def derived_status_label(case: Case) -> str:
    """'active' -> 'Active'"""
    return case.status.value.capitalize()


def priority_label(case: Case) -> str:
    return f"{case.priority.value.capitalize()} Priority"


def is_owner(viewer: Viewer, case: Case) -> bool:
    """True when an authenticated viewer reported this case"""
    if not viewer.is_authenticated or case.reported_by is None:
        return False
    return case.reported_by.id == viewer.user_id


def is_admin(viewer: Viewer) -> bool:
    return viewer.is_authenticated and viewer.role in ADMIN_ROLES


def can_modify(viewer: Viewer, case: Case) -> bool:
    return is_owner(viewer, case) or is_admin(viewer)


def case_detail_path(case_id: str) -> str:
    return f"/missing-persons/{case_id}"


def sightings_for_display(sightings: Iterable[Sighting]) -> List[DisplaySighting]:
    """
    Order sightings oldest-first and number them from 1

    Sightings without a timestamp keep their API order after the dated ones.
    """
    indexed = list(enumerate(sightings))
    indexed.sort(key=lambda pair: (pair[1].created_at is None, _timestamp(pair[1]), pair[0]))

    return [
        DisplaySighting(
            index=position,
            sighting=sighting,
            condition_label=sighting.sighting_info.person_condition.label,
            reporter_name=sighting.reporter_name,
        )
        for position, (_, sighting) in enumerate(indexed, start=1)
    ]


def _timestamp(sighting: Sighting) -> float:
    if sighting.created_at is None:
        return 0.0
    return sighting.created_at.timestamp()
