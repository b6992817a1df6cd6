"""Data models for Case Portal"""

from .case import Case, CaseAction, CasePriority, CaseStatus, UserRef
from .outcomes import ActionOutcome, Notice, NoticeLevel, OutcomeKind
from .sighting import (
    Alone,
    ContactAttempted,
    NoContactAttempt,
    PersonCondition,
    Sighting,
    SightingForm,
    SightingStatus,
    SightingSubmission,
    WithOthers,
)
from .user import Role, UnknownRoleError, Viewer
from .requests import (
    AdminDashboardResponse,
    CaseViewResponse,
    DashboardStats,
    DisplaySighting,
    HealthResponse,
    MarkFoundRequest,
    NotFoundResponse,
    SightingSubmitResponse,
    StepValidationResponse,
)

__all__ = [
    "Case",
    "CaseAction",
    "CasePriority",
    "CaseStatus",
    "UserRef",
    "ActionOutcome",
    "Notice",
    "NoticeLevel",
    "OutcomeKind",
    "Alone",
    "ContactAttempted",
    "NoContactAttempt",
    "PersonCondition",
    "Sighting",
    "SightingForm",
    "SightingStatus",
    "SightingSubmission",
    "WithOthers",
    "Role",
    "UnknownRoleError",
    "Viewer",
    "AdminDashboardResponse",
    "CaseViewResponse",
    "DashboardStats",
    "DisplaySighting",
    "HealthResponse",
    "MarkFoundRequest",
    "NotFoundResponse",
    "SightingSubmitResponse",
    "StepValidationResponse",
]
