"""
Actor identity token.

Dependencies: tuning_backend.boundary.db.models
System role: Read-only capability passed to every operation
"""

from dataclasses import dataclass
from uuid import UUID

from tuning_backend.boundary.db.models.user_model import UserModel, UserRole


@dataclass(frozen=True)
class Actor:
    """
    Authenticated caller.

    Attributes:
        id: User UUID
        role: Role read from storage for this request
        display_name: Name shown to other participants
    """

    id: UUID
    role: UserRole
    display_name: str

    @property
    def is_operator(self) -> bool:
        return self.role is UserRole.OPERATOR

    @classmethod
    def from_user(cls, user: UserModel) -> "Actor":
        return cls(id=user.id, role=user.role, display_name=user.shown_name)
