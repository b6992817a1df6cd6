"""
Sighting Submission Wizard

Four-step flow (When -> Where -> Details -> Submit) for reporting a sighting
of a missing person. Moving forward requires the current step to validate;
moving back is free and keeps every value. The wizard can only be opened for
an active case, and the case is checked again right before the single POST.
"""

import logging
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from enum import IntEnum
from typing import Any, Callable, Dict, Optional, Tuple
from zoneinfo import ZoneInfo

from case_portal.config.settings import settings
from case_portal.core.case_state import can_submit_sighting, case_detail_path
from case_portal.core.errors import ForbiddenError, PreconditionError
from case_portal.infrastructure.api.client import ApiError, CaseNotFoundError, MissingPersonsClient
from case_portal.models.case import Case
from case_portal.models.outcomes import ActionOutcome, NoticeLevel, OutcomeKind
from case_portal.models.sighting import (
    Alone,
    ContactAttempted,
    NoContactAttempt,
    SightingForm,
    SightingLocation,
    SightingSubmission,
    WithOthers,
)
from case_portal.models.user import Viewer

logger = logging.getLogger(__name__)

INACTIVE_CASE_MESSAGE = "This case is no longer active"
SUBMIT_ERROR_MESSAGE = "Error submitting sighting"
SUBMIT_SUCCESS_MESSAGE = "Sighting reported successfully! Thank you for your help."

# Naive results are taken as the server's local time
Clock = Callable[[], datetime]


class WizardStep(IntEnum):
    WHEN = 1
    WHERE = 2
    DETAILS = 3
    SUBMIT = 4

    @property
    def title(self) -> str:
        return self.name.capitalize()


# Form fields entered on each step
STEP_FIELDS = {
    WizardStep.WHEN: ("sighting_date", "sighting_time"),
    WizardStep.WHERE: ("city", "subcity", "woreda", "specific_location"),
    WizardStep.DETAILS: ("description", "person_condition", "was_alone", "companion_description"),
    WizardStep.SUBMIT: ("did_attempt_contact", "contact_result", "photo_url", "is_anonymous"),
}

# camelCase wire names -> form attribute names
_FIELD_NAMES = {
    **{name: name for name in SightingForm.model_fields},
    **{info.alias: name for name, info in SightingForm.model_fields.items() if info.alias},
}


def _parse_date(value: str) -> Optional[date]:
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def _parse_time(value: str) -> Optional[time]:
    try:
        return time.fromisoformat(value.strip())
    except ValueError:
        return None


class SightingWizard:
    """Stepwise sighting report for one active case"""

    def __init__(
        self,
        client: MissingPersonsClient,
        case: Case,
        viewer: Viewer,
        clock: Optional[Clock] = None,
        form: Optional[SightingForm] = None,
    ):
        if not viewer.is_authenticated:
            raise ForbiddenError("Please log in to report a sighting", navigate_to="/login")
        if not can_submit_sighting(case):
            raise PreconditionError(INACTIVE_CASE_MESSAGE, navigate_to=case_detail_path(case.id))

        self.client = client
        self.case = case
        self.viewer = viewer
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.form = form or SightingForm()
        self.step = WizardStep.WHEN
        self.errors: Dict[str, str] = {}
        self.submitting = False
        self.submitted = False

    @classmethod
    async def open(
        cls,
        client: MissingPersonsClient,
        case_id: str,
        viewer: Viewer,
        clock: Optional[Clock] = None,
    ) -> "SightingWizard":
        """
        Load the case and start a wizard for it

        Raises:
            CaseNotFoundError: If the case does not exist
            ApiError: If the case could not be loaded
            PreconditionError: If the case is not active or the viewer is anonymous
        """
        detail = await client.get_case(case_id)
        wizard = cls(client, detail.case, viewer, clock=clock)
        logger.info(f"Sighting wizard opened for case {case_id} by {viewer.user_id}")
        return wizard

    @property
    def case_path(self) -> str:
        return case_detail_path(self.case.id)

    def set_field(self, name: str, value: Any) -> None:
        """
        Change one form value, clearing only that field's error

        Args:
            name: Form attribute or its camelCase name
            value: New value

        Raises:
            ValueError: If the field is unknown or the value has the wrong type
        """
        attr = _FIELD_NAMES.get(name)
        if attr is None:
            raise ValueError(f"Unknown sighting field: {name}")
        setattr(self.form, attr, value)
        self.errors.pop(attr, None)

    def update(self, **values: Any) -> None:
        for name, value in values.items():
            self.set_field(name, value)

    def validate_step(self, step: Optional[int] = None) -> bool:
        """
        Validate a step (the current one by default), replacing the error map

        Returns:
            True if the step has no errors
        """
        step = WizardStep(step or self.step)
        self.errors = self._step_errors(step)
        if self.errors:
            logger.debug(f"Step {step.name} invalid for case {self.case.id}: {sorted(self.errors)}")
        return not self.errors

    def _step_errors(self, step: WizardStep) -> Dict[str, str]:
        form = self.form
        errors: Dict[str, str] = {}

        if step == WizardStep.WHEN:
            if not form.sighting_date.strip():
                errors["sighting_date"] = "Date is required"
            elif _parse_date(form.sighting_date) is None:
                errors["sighting_date"] = "Enter a valid date"
            if not form.sighting_time.strip():
                errors["sighting_time"] = "Time is required"
            elif _parse_time(form.sighting_time) is None:
                errors["sighting_time"] = "Enter a valid time"

            when = self._sighting_datetime()
            if when is not None and when > self._now():
                errors["sighting_date"] = "Sighting cannot be in the future"

        elif step == WizardStep.WHERE:
            if not form.city.strip():
                errors["city"] = "City is required"
            if not form.specific_location.strip():
                errors["specific_location"] = "Specific location is required"

        elif step == WizardStep.DETAILS:
            min_length = settings.sighting_description_min_length
            if not form.description.strip():
                errors["description"] = "Description is required"
            elif len(form.description) < min_length:
                errors["description"] = f"Description must be at least {min_length} characters"
            if not form.was_alone and not form.companion_description.strip():
                errors["companion_description"] = "Please describe the companion(s)"

        elif step == WizardStep.SUBMIT:
            if (
                settings.require_contact_result
                and form.did_attempt_contact
                and not form.contact_result.strip()
            ):
                errors["contact_result"] = "Please describe what happened when you approached"

        return errors

    def _reporter_zone(self) -> tzinfo:
        """Zone the reporter entered the date and time in"""
        if self.form.utc_offset_minutes is not None:
            return timezone(timedelta(minutes=self.form.utc_offset_minutes))
        return ZoneInfo(settings.timezone)

    def _now(self) -> datetime:
        now = self.clock()
        return now if now.tzinfo is not None else now.astimezone()

    def _sighting_datetime(self) -> Optional[datetime]:
        day = _parse_date(self.form.sighting_date)
        at = _parse_time(self.form.sighting_time)
        if day is None or at is None:
            return None
        return datetime.combine(day, at, tzinfo=self._reporter_zone())

    def next(self) -> bool:
        """Advance one step if the current step validates"""
        if self.step == WizardStep.SUBMIT:
            return False
        if not self.validate_step():
            return False
        self.step = WizardStep(self.step + 1)
        return True

    def back(self) -> bool:
        """Go back one step; never validates and never drops values"""
        if self.step == WizardStep.WHEN:
            return False
        self.step = WizardStep(self.step - 1)
        return True

    def invalid_steps(self) -> Dict[WizardStep, Dict[str, str]]:
        """Errors of every step, without touching the displayed error map"""
        result = {}
        for step in WizardStep:
            errors = self._step_errors(step)
            if errors:
                result[step] = errors
        return result

    def build_submission(self) -> SightingSubmission:
        """
        Assemble the submission payload from all steps

        Raises:
            ValueError: If any step does not validate
        """
        invalid = self.invalid_steps()
        if invalid:
            first = min(invalid)
            raise ValueError(f"Step {first.title} is incomplete: {', '.join(sorted(invalid[first]))}")

        form = self.form
        if form.was_alone:
            companionship = Alone()
        else:
            companionship = WithOthers(description=form.companion_description.strip())

        if form.did_attempt_contact:
            contact = ContactAttempted(result=form.contact_result.strip())
        else:
            contact = NoContactAttempt()

        return SightingSubmission(
            missing_person=self.case.id,
            sighting_date=_parse_date(form.sighting_date),
            sighting_time=_parse_time(form.sighting_time),
            location=SightingLocation(
                city=form.city.strip(),
                subcity=form.subcity.strip(),
                woreda=form.woreda.strip(),
                specific_location=form.specific_location.strip(),
            ),
            description=form.description,
            person_condition=form.person_condition,
            companionship=companionship,
            contact=contact,
            photo_url=form.photo_url.strip() or None,
            is_anonymous=form.is_anonymous,
        )

    def review_summary(self) -> Dict[str, str]:
        """Summary shown on the Submit step"""
        form = self.form
        return {
            "date_time": f"{form.sighting_date} at {form.sighting_time}",
            "location": f"{form.specific_location}, {form.city}",
            "condition": form.person_condition.label,
            "alone": "Yes" if form.was_alone else "No",
        }

    async def submit(self) -> ActionOutcome:
        """
        Submit the sighting from the final step

        The case is refetched first; if it is no longer active nothing is
        posted. On an API failure the wizard stays on the Submit step with all
        values intact so the reporter can retry.
        """
        if self.submitted:
            return ActionOutcome.failed(
                OutcomeKind.PRECONDITION,
                "This sighting has already been submitted",
                navigate_to=self.case_path,
                level=NoticeLevel.INFO,
            )
        if self.submitting:
            return ActionOutcome.failed(
                OutcomeKind.PRECONDITION,
                "Your sighting is already being submitted",
                level=NoticeLevel.INFO,
            )
        if self.step != WizardStep.SUBMIT:
            return ActionOutcome.failed(
                OutcomeKind.PRECONDITION,
                "Complete all steps before submitting",
                level=NoticeLevel.WARNING,
            )
        if not self.validate_step():
            return ActionOutcome.failed(OutcomeKind.VALIDATION, errors=dict(self.errors))

        self.submitting = True
        try:
            outcome, payload = await self._prepare()
            if outcome is not None:
                return outcome

            try:
                await self.client.create_sighting(payload)
            except ApiError as e:
                logger.error(f"Sighting submission failed for case {self.case.id}: {e.message}")
                return ActionOutcome.failed(
                    OutcomeKind.API_ERROR,
                    e.server_message or SUBMIT_ERROR_MESSAGE,
                    retryable=e.retryable,
                )
        finally:
            self.submitting = False

        self.submitted = True
        logger.info(f"Sighting submitted for case {self.case.id}")
        return ActionOutcome.ok(SUBMIT_SUCCESS_MESSAGE, navigate_to=self.case_path)

    async def _prepare(self) -> Tuple[Optional[ActionOutcome], Dict[str, Any]]:
        """Re-check the active-case gate and build the payload"""
        try:
            detail = await self.client.get_case(self.case.id)
        except CaseNotFoundError:
            return ActionOutcome.failed(
                OutcomeKind.NOT_FOUND,
                "Error loading missing person details",
                navigate_to="/missing-persons",
            ), {}
        except ApiError as e:
            return ActionOutcome.failed(
                OutcomeKind.API_ERROR,
                e.server_message or SUBMIT_ERROR_MESSAGE,
                retryable=e.retryable,
            ), {}

        self.case = detail.case
        if not can_submit_sighting(self.case):
            logger.warning(f"Case {self.case.id} became {self.case.status.value} before submission")
            return PreconditionError(INACTIVE_CASE_MESSAGE, navigate_to=self.case_path).to_outcome(), {}

        try:
            submission = self.build_submission()
        except ValueError as e:
            return ActionOutcome.failed(OutcomeKind.VALIDATION, str(e), level=NoticeLevel.WARNING), {}

        return None, submission.to_payload()
