"""
Outcome Models

User-facing results of actions: a notice to display and a path to navigate to.
"""

from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field


class NoticeLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Notice(BaseModel):
    """Message shown to the user as a toast"""

    level: NoticeLevel
    message: str


class OutcomeKind(str, Enum):
    """How an action ended"""
    OK = "ok"
    VALIDATION = "validation"
    PRECONDITION = "precondition"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    API_ERROR = "api_error"


class ActionOutcome(BaseModel):
    """Result of a user-initiated action"""

    kind: OutcomeKind = Field(OutcomeKind.OK)
    notice: Optional[Notice] = Field(None, description="Toast to display, if any")
    navigate_to: Optional[str] = Field(None, description="Route the browser should open")
    retryable: bool = Field(False, description="True when the same action may succeed if retried")
    errors: Dict[str, str] = Field(default_factory=dict, description="Field-scoped validation errors")

    @property
    def success(self) -> bool:
        return self.kind == OutcomeKind.OK

    @classmethod
    def ok(cls, message: Optional[str] = None, navigate_to: Optional[str] = None) -> "ActionOutcome":
        notice = Notice(level=NoticeLevel.SUCCESS, message=message) if message else None
        return cls(kind=OutcomeKind.OK, notice=notice, navigate_to=navigate_to)

    @classmethod
    def failed(
        cls,
        kind: OutcomeKind,
        message: Optional[str] = None,
        navigate_to: Optional[str] = None,
        retryable: bool = False,
        errors: Optional[Dict[str, str]] = None,
        level: NoticeLevel = NoticeLevel.ERROR,
    ) -> "ActionOutcome":
        notice = Notice(level=level, message=message) if message else None
        return cls(
            kind=kind,
            notice=notice,
            navigate_to=navigate_to,
            retryable=retryable,
            errors=errors or {},
        )
