"""
User ORM model.

Identity records for requesters and the operator. Credentials live outside
this service; the core only reads ``id``, ``role`` and the display fields.

Dependencies: sqlalchemy, tuning_backend.boundary.db.base
System role: Actor identity persistence
"""

import enum

from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from tuning_backend.boundary.db.base import Base, TimestampMixin, UUIDMixin


class UserRole(str, enum.Enum):
    """
    Actor roles.

    REQUESTER: Submits and owns jobs
    OPERATOR: Fulfills and administers every job
    """

    REQUESTER = "requester"
    OPERATOR = "operator"


class UserModel(Base, UUIDMixin, TimestampMixin):
    """
    User ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        email: Login email (unique)
        display_name: Optional name shown to other participants
        role: Actor role; changes take effect on the next authorization check
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)

    display_name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        default=None,
    )

    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, native_enum=False),
        nullable=False,
        default=UserRole.REQUESTER,
    )

    @property
    def shown_name(self) -> str:
        """Name rendered next to messages and in notifications."""
        return self.display_name or self.email
