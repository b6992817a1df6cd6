"""
Case Data Models

Schema of the missing-person case record returned by the remote API.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class CaseStatus(str, Enum):
    """Case lifecycle status"""
    ACTIVE = "active"
    FOUND = "found"
    CLOSED = "closed"


class CasePriority(str, Enum):
    """Case priority (informational only)"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ApiModel(BaseModel):
    """Base for records parsed from the remote API (camelCase on the wire)"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class UserRef(ApiModel):
    """Reference to a user embedded in a record"""

    id: str = Field(..., validation_alias=AliasChoices("_id", "id"))
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)


class PersonalInfo(ApiModel):
    first_name: str = Field("", alias="firstName")
    middle_name: Optional[str] = Field(None, alias="middleName")
    last_name: str = Field("", alias="lastName")
    age: Optional[int] = Field(None, ge=0)
    gender: Optional[str] = None
    photo: Optional[str] = None

    @property
    def display_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)


class LastSeenLocation(ApiModel):
    city: Optional[str] = None
    specific_location: Optional[str] = Field(None, alias="specificLocation")


class LastSeenInfo(ApiModel):
    date: Optional[str] = None
    location: LastSeenLocation = Field(default_factory=LastSeenLocation)
    circumstances: Optional[str] = None


class Case(ApiModel):
    """Missing person case as returned by GET /missing-persons/{id}"""

    id: str = Field(..., validation_alias=AliasChoices("_id", "id"), description="Case ID")
    case_number: Optional[str] = Field(None, alias="caseNumber", description="Human-readable case number")
    status: CaseStatus = Field(..., description="Lifecycle status")
    is_verified: bool = Field(False, alias="isVerified")
    priority: CasePriority = Field(CasePriority.MEDIUM)
    reported_by: Optional[UserRef] = Field(None, alias="reportedBy")
    views: int = Field(0, ge=0)
    sightings_count: int = Field(0, ge=0, alias="sightingsCount")
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo, alias="personalInfo")
    last_seen_info: LastSeenInfo = Field(default_factory=LastSeenInfo, alias="lastSeenInfo")
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "_id": "665f1c2e9b1e8a0012345678",
                "caseNumber": "MP-2024-0042",
                "status": "active",
                "isVerified": False,
                "priority": "high",
                "reportedBy": {"_id": "u-1", "firstName": "Abebe", "lastName": "Kebede"},
                "views": 120,
                "sightingsCount": 2,
                "personalInfo": {"firstName": "Sara", "lastName": "Tadesse", "age": 14},
                "lastSeenInfo": {"date": "2024-01-01", "location": {"city": "Addis Ababa"}},
            }
        },
    )


class CaseAction(str, Enum):
    """Mutating actions a viewer may take on a case"""
    REPORT_SIGHTING = "report_sighting"
    VERIFY = "verify"
    DELETE = "delete"
    MARK_FOUND = "mark_found"
    EDIT = "edit"
