"""
Message CRUD operations.

Append and ordered read of job message threads. There is no update or
delete path.

Dependencies: sqlalchemy, tuning_backend.boundary.db.models
System role: Message thread persistence
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tuning_backend.boundary.db.CRUD.base_crud import BaseCRUD
from tuning_backend.boundary.db.models.message_model import MessageModel
from tuning_backend.boundary.db.models.user_model import UserModel


class MessageCRUD(BaseCRUD[MessageModel]):
    """CRUD operations for MessageModel."""

    def __init__(self) -> None:
        """Initialize MessageCRUD with MessageModel."""
        super().__init__(MessageModel)

    async def post(
        self,
        session: AsyncSession,
        job_id: UUID,
        author_id: UUID,
        body: str,
    ) -> MessageModel:
        """
        Append a message to a job's thread.

        Args:
            session: Async database session
            job_id: Job UUID
            author_id: Posting user
            body: Validated message text

        Returns:
            Persisted MessageModel
        """
        return await self.create(session, job_id=job_id, author_id=author_id, body=body)

    async def list_with_authors(
        self,
        session: AsyncSession,
        job_id: UUID,
    ) -> Sequence[tuple[MessageModel, UserModel]]:
        """
        List a job's messages oldest first with their authors.

        Args:
            session: Async database session
            job_id: Job UUID

        Returns:
            Sequence of (MessageModel, author UserModel) rows
        """
        stmt = (
            select(MessageModel, UserModel)
            .join(UserModel, MessageModel.author_id == UserModel.id)
            .where(MessageModel.job_id == job_id)
            .order_by(MessageModel.created_at.asc(), MessageModel.id)
        )
        result = await session.execute(stmt)
        return [(message, author) for message, author in result.all()]


message_crud = MessageCRUD()
