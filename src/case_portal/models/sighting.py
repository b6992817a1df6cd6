"""
Sighting Data Models

Sighting records received from the remote API and the submission payload
assembled by the sighting wizard.
"""

from datetime import date, datetime, time
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, Field, field_validator

from .case import ApiModel, UserRef


class SightingStatus(str, Enum):
    """Review status of a sighting (admin-controlled)"""
    PENDING = "pending"
    UNVERIFIED = "unverified"
    INVESTIGATING = "investigating"
    VERIFIED = "verified"


class PersonCondition(str, Enum):
    """Apparent condition of the person when sighted"""
    WELL = "appeared_well"
    DISTRESSED = "appeared_distressed"
    INJURED = "appeared_injured"
    CONFUSED = "appeared_confused"
    UNKNOWN = "unknown"

    @property
    def label(self) -> str:
        return CONDITION_LABELS[self]


CONDITION_LABELS = {
    PersonCondition.WELL: "Appeared Well",
    PersonCondition.DISTRESSED: "Appeared Distressed",
    PersonCondition.INJURED: "Appeared Injured",
    PersonCondition.CONFUSED: "Appeared Confused",
    PersonCondition.UNKNOWN: "Unknown / Couldn't Tell",
}


class SightingLocation(ApiModel):
    city: str = ""
    subcity: str = ""
    woreda: str = ""
    specific_location: str = Field("", alias="specificLocation")


class SightingInfo(ApiModel):
    date: Optional[str] = None
    time: Optional[str] = None
    location: SightingLocation = Field(default_factory=SightingLocation)
    description: str = ""
    person_condition: PersonCondition = Field(PersonCondition.UNKNOWN, alias="personCondition")
    was_alone: bool = Field(True, alias="wasAlone")
    companion_description: str = Field("", alias="companionDescription")


class SightingEvidence(ApiModel):
    photos: List[str] = Field(default_factory=list)


class ContactAttemptRecord(ApiModel):
    did_attempt_contact: bool = Field(False, alias="didAttemptContact")
    contact_result: str = Field("", alias="contactResult")


class Sighting(ApiModel):
    """Sighting record as embedded in GET /missing-persons/{id}"""

    id: str = Field(..., validation_alias=AliasChoices("_id", "id"))
    missing_person: Optional[str] = Field(None, alias="missingPerson")
    sighting_info: SightingInfo = Field(default_factory=SightingInfo, alias="sightingInfo")
    evidence: SightingEvidence = Field(default_factory=SightingEvidence)
    contact_attempt: ContactAttemptRecord = Field(default_factory=ContactAttemptRecord, alias="contactAttempt")
    status: SightingStatus = Field(SightingStatus.UNVERIFIED)
    is_anonymous: bool = Field(False, alias="isAnonymous")
    reported_by: Optional[UserRef] = Field(None, alias="reportedBy")
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    @field_validator("missing_person", mode="before")
    @classmethod
    def _normalize_case_ref(cls, value: Any) -> Any:
        # The API populates the reference on some endpoints
        if isinstance(value, dict):
            return value.get("_id") or value.get("id")
        return value

    @property
    def reporter_name(self) -> Optional[str]:
        """Reporter's name, hidden for anonymous sightings"""
        if self.is_anonymous or self.reported_by is None:
            return None
        return self.reported_by.full_name or None


# Tagged variants for the conditionally-required wizard fields

class Alone(BaseModel):
    kind: Literal["alone"] = "alone"


class WithOthers(BaseModel):
    kind: Literal["with_others"] = "with_others"
    description: str = Field(..., min_length=1, description="Who the person was with")


Companionship = Annotated[Union[Alone, WithOthers], Field(discriminator="kind")]


class NoContactAttempt(BaseModel):
    kind: Literal["none"] = "none"


class ContactAttempted(BaseModel):
    kind: Literal["attempted"] = "attempted"
    result: str = Field("", description="What happened when the reporter approached")


ContactAttempt = Annotated[Union[NoContactAttempt, ContactAttempted], Field(discriminator="kind")]


class SightingSubmission(BaseModel):
    """Validated sighting ready for POST /sightings"""

    missing_person: str = Field(..., min_length=1, description="Case ID")
    sighting_date: date
    sighting_time: time
    location: SightingLocation
    description: str = Field(..., min_length=1)
    person_condition: PersonCondition = PersonCondition.UNKNOWN
    companionship: Companionship = Field(default_factory=Alone)
    contact: ContactAttempt = Field(default_factory=NoContactAttempt)
    photo_url: Optional[str] = None
    is_anonymous: bool = False

    def to_payload(self) -> Dict[str, Any]:
        """Wire form of the submission (camelCase, nested)"""
        was_alone = isinstance(self.companionship, Alone)
        attempted = isinstance(self.contact, ContactAttempted)
        return {
            "missingPerson": self.missing_person,
            "sightingInfo": {
                "date": self.sighting_date.isoformat(),
                "time": self.sighting_time.strftime("%H:%M"),
                "location": {
                    "city": self.location.city,
                    "subcity": self.location.subcity,
                    "woreda": self.location.woreda,
                    "specificLocation": self.location.specific_location,
                },
                "description": self.description,
                "personCondition": self.person_condition.value,
                "wasAlone": was_alone,
                "companionDescription": "" if was_alone else self.companionship.description,
            },
            "evidence": {
                "photos": [self.photo_url] if self.photo_url else []
            },
            "contactAttempt": {
                "didAttemptContact": attempted,
                "contactResult": self.contact.result if attempted else "",
            },
            "isAnonymous": self.is_anonymous,
        }


class SightingForm(BaseModel):
    """Raw wizard input, field by field, as the reporter typed it"""

    # Step 1: When
    sighting_date: str = Field("", alias="sightingDate", description="YYYY-MM-DD")
    sighting_time: str = Field("", alias="sightingTime", description="HH:MM")
    # Step 2: Where
    city: str = ""
    subcity: str = ""
    woreda: str = ""
    specific_location: str = Field("", alias="specificLocation")
    # Step 3: Details
    description: str = ""
    person_condition: PersonCondition = Field(PersonCondition.UNKNOWN, alias="personCondition")
    was_alone: bool = Field(True, alias="wasAlone")
    companion_description: str = Field("", alias="companionDescription")
    # Step 4: Submit
    did_attempt_contact: bool = Field(False, alias="didAttemptContact")
    contact_result: str = Field("", alias="contactResult")
    photo_url: str = Field("", alias="photoUrl")
    is_anonymous: bool = Field(False, alias="isAnonymous")
    # Browser context, east of UTC positive
    utc_offset_minutes: Optional[int] = Field(
        None,
        alias="utcOffsetMinutes",
        ge=-720,
        le=840,
        description="Reporter's offset from UTC in minutes; settings.timezone applies when absent",
    )

    model_config = {"populate_by_name": True, "validate_assignment": True}
