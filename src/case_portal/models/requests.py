"""
API Request and Response Models

Pydantic models for the browser-facing API input/output.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .case import Case, CaseAction, CaseStatus
from .outcomes import ActionOutcome
from .sighting import Sighting


class MarkFoundRequest(BaseModel):
    """Body of the mark-as-found modal"""

    found_location: str = Field("", alias="foundLocation", description="Where the person was found")
    notes: Optional[str] = Field(None, description="Optional notes")

    model_config = {"populate_by_name": True}


class DisplaySighting(BaseModel):
    """Sighting with its position in the oldest-first list"""

    index: int = Field(..., ge=1, description="1-based display index")
    sighting: Sighting
    condition_label: str
    reporter_name: Optional[str] = Field(None, description="Hidden for anonymous sightings")


class CaseViewResponse(BaseModel):
    """Case detail view for a given viewer"""

    case: Case
    status_label: str
    priority_label: str
    can_submit_sighting: bool
    actions: List[CaseAction] = Field(default_factory=list)
    sightings: List[DisplaySighting] = Field(default_factory=list)


class NotFoundResponse(BaseModel):
    message: str = Field(default="The missing person you're looking for doesn't exist or has been removed.")
    back_to: str = Field(default="/missing-persons")


class StepValidationResponse(BaseModel):
    """Result of validating one wizard step"""

    step: int = Field(..., ge=1, le=4)
    valid: bool
    errors: Dict[str, str] = Field(default_factory=dict)
    summary: Optional[Dict[str, str]] = Field(None, description="Review summary, returned for the Submit step")


class SightingSubmitResponse(BaseModel):
    """Result of a full wizard run"""

    step: int = Field(..., ge=1, le=4, description="Step the wizard ended on")
    outcome: ActionOutcome


class DashboardStats(BaseModel):
    total_cases: int = 0
    active_cases: int = 0
    resolved_cases: int = 0
    total_sightings: int = 0
    pending_verifications: int = 0


class AdminDashboardResponse(BaseModel):
    stats: DashboardStats
    status_filter: Optional[CaseStatus] = None
    query: str = ""
    cases: List[Case] = Field(default_factory=list)
    verification_queue: List[Case] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Health check response"""

    status: str = Field(default="healthy")
    service: str = Field(default="mp-case-portal")
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    api_available: bool = Field(default=True)
