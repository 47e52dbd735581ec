"""
User service.

Resolves actors from storage and provisions accounts. Authentication is
handled upstream; this service only trusts the user id it is given.

Dependencies: sqlalchemy, tuning_backend.boundary.db.CRUD
System role: Identity lookup and account provisioning
"""

import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tuning_backend.boundary.db.CRUD.user_crud import user_crud
from tuning_backend.boundary.db.models.user_model import UserModel, UserRole
from tuning_backend.core.actor import Actor
from tuning_backend.core.exceptions import PersistenceError, ValidationError

logger = logging.getLogger(__name__)


class UserService:
    """User service."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize user service.

        Args:
            db: Async database session
        """
        self.db = db

    async def get_actor(self, user_id: UUID | None) -> Actor | None:
        """
        Build the actor for a user id, reading the role fresh from storage.

        Returns:
            Actor, or None when the id is missing or unknown
        """
        if user_id is None:
            return None
        try:
            user = await user_crud.get_by_id(self.db, user_id)
        except SQLAlchemyError as e:
            logger.exception("Failed to load user", extra={"user_id": str(user_id)})
            raise PersistenceError(operation="get_actor") from e
        return Actor.from_user(user) if user is not None else None

    async def register_user(
        self,
        email: str,
        role: UserRole = UserRole.REQUESTER,
        display_name: str | None = None,
    ) -> UserModel:
        """
        Create an account.

        Raises:
            ValidationError: Blank email, or email already registered
        """
        email = (email or "").strip().lower()
        if not email:
            raise ValidationError("Email is required", field="email")

        try:
            if await user_crud.get_by_email(self.db, email) is not None:
                raise ValidationError("Email already registered", field="email")
            user = await user_crud.create(
                self.db, email=email, role=role, display_name=display_name
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception("Failed to register user", extra={"email": email})
            raise PersistenceError(operation="register_user") from e

        logger.info("User registered", extra={"user_id": str(user.id), "role": role.value})
        return user

    async def ensure_default_operator(self, email: str) -> UserModel | None:
        """
        Make sure at least one operator account exists.

        Returns the existing operator if there is one, otherwise creates
        one with the given email. If that email already belongs to a
        requester, nothing is created and None is returned; roles are never
        changed here.
        """
        existing = await user_crud.get_any_operator(self.db)
        if existing is not None:
            return existing

        taken = await user_crud.get_by_email(self.db, email.strip().lower())
        if taken is not None:
            logger.warning(
                "Default operator email belongs to a requester, no operator created",
                extra={"email": taken.email, "user_id": str(taken.id)},
            )
            return None

        logger.info("No operator account found, creating default", extra={"email": email})
        return await self.register_user(email, role=UserRole.OPERATOR, display_name="Operator")
