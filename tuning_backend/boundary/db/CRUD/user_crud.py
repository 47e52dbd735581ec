"""
User CRUD operations.

Dependencies: sqlalchemy, tuning_backend.boundary.db.models
System role: Actor identity lookups
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tuning_backend.boundary.db.CRUD.base_crud import BaseCRUD
from tuning_backend.boundary.db.models.user_model import UserModel, UserRole


class UserCRUD(BaseCRUD[UserModel]):
    """CRUD operations for UserModel."""

    def __init__(self) -> None:
        """Initialize UserCRUD with UserModel."""
        super().__init__(UserModel)

    async def get_by_email(self, session: AsyncSession, email: str) -> UserModel | None:
        """
        Retrieve a user by login email.

        Args:
            session: Async database session
            email: Email address (exact match)

        Returns:
            UserModel if found, None otherwise
        """
        stmt = select(UserModel).where(UserModel.email == email)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_any_operator(self, session: AsyncSession) -> UserModel | None:
        """Return one operator account, if any exists."""
        stmt = select(UserModel).where(UserModel.role == UserRole.OPERATOR).limit(1)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()


user_crud = UserCRUD()
