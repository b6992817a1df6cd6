"""
Viewer Models

Roles and the viewer identity derived from gateway headers.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Role(str, Enum):
    """Closed set of account roles"""
    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"


ADMIN_ROLES = frozenset({Role.ADMIN, Role.MODERATOR})


class UnknownRoleError(ValueError):
    """Raised when the auth boundary receives a role outside the Role enum"""


class Viewer(BaseModel):
    """The person looking at a view; anonymous when user_id is None"""

    user_id: Optional[str] = Field(None, description="Authenticated user ID")
    role: Optional[Role] = Field(None, description="Role of the authenticated user")

    model_config = {"frozen": True}

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @classmethod
    def anonymous(cls) -> "Viewer":
        return cls()

    @classmethod
    def from_headers(cls, user_id: Optional[str], role: Optional[str]) -> "Viewer":
        """
        Build a viewer from the X-User-ID / X-User-Role gateway headers

        Args:
            user_id: Value of X-User-ID (None or blank for anonymous)
            role: Value of X-User-Role (defaults to "user" when a user ID is present)

        Returns:
            Viewer

        Raises:
            UnknownRoleError: If the role is not a known Role value
        """
        user_id = (user_id or "").strip() or None
        if user_id is None:
            return cls.anonymous()

        raw_role = (role or Role.USER.value).strip().lower()
        try:
            parsed = Role(raw_role)
        except ValueError:
            raise UnknownRoleError(f"Unknown role: {role!r}")

        return cls(user_id=user_id, role=parsed)
