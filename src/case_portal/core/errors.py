"""Errors raised by the case engine before any API call is made."""

from typing import Optional

from case_portal.models.outcomes import ActionOutcome, NoticeLevel, OutcomeKind


class PreconditionError(Exception):
    """An action was attempted while its gate does not hold"""

    def __init__(
        self,
        message: str,
        kind: OutcomeKind = OutcomeKind.PRECONDITION,
        navigate_to: Optional[str] = None,
        level: NoticeLevel = NoticeLevel.WARNING,
    ):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.navigate_to = navigate_to
        self.level = level

    def to_outcome(self) -> ActionOutcome:
        return ActionOutcome.failed(
            self.kind,
            self.message,
            navigate_to=self.navigate_to,
            level=self.level,
        )


class ForbiddenError(PreconditionError):
    """The viewer's role does not allow the action"""

    def __init__(self, message: str = "You are not allowed to perform this action", navigate_to: Optional[str] = None):
        super().__init__(message, kind=OutcomeKind.FORBIDDEN, navigate_to=navigate_to, level=NoticeLevel.ERROR)
