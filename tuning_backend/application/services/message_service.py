"""
Message service orchestrator.

Per-job conversation between the owner and the operator. Whoever may post
to a thread may read it, and the reverse.

Dependencies: tuning_backend.boundary.db.CRUD, tuning_backend.core
System role: Message thread orchestration
"""

import logging
from typing import Any
from uuid import UUID

from tuning_backend.application.services.base_service import BaseService
from tuning_backend.boundary.db.CRUD.message_crud import message_crud
from tuning_backend.boundary.db.models.message_model import MessageModel
from tuning_backend.boundary.db.models.user_model import UserRole
from tuning_backend.core.access_policy import Operation
from tuning_backend.core.actor import Actor
from tuning_backend.core.events.rooms import job_room
from tuning_backend.core.exceptions import ValidationError
from tuning_backend.models.events import EventType, RoomEvent, SinkEvent, SinkEventType

logger = logging.getLogger(__name__)

MAX_BODY_LENGTH = 5000


def _message_view(
    message: MessageModel,
    author_name: str,
    author_role: UserRole,
) -> dict[str, Any]:
    return {
        "id": message.id,
        "job_id": message.job_id,
        "author_id": message.author_id,
        "author_name": author_name,
        "author_role": author_role.value,
        "body": message.body,
        "created_at": message.created_at,
    }


class MessageService(BaseService):
    """Message service orchestrator."""

    async def post_message(
        self,
        actor: Actor | None,
        job_id: UUID,
        body: str | None,
    ) -> dict[str, Any]:
        """
        Append a message to a job's thread.

        Args:
            actor: Job owner or operator
            job_id: Job UUID
            body: Message text (trimmed before storage)

        Returns:
            dict: Message view with author name and role

        Raises:
            ValidationError: Blank or oversized body
            ForbiddenError / NotFoundError: Actor may not use this thread
        """
        text = (body or "").strip()
        if not text:
            raise ValidationError("Message body must not be empty", field="body")
        if len(text) > MAX_BODY_LENGTH:
            raise ValidationError(
                f"Message body exceeds {MAX_BODY_LENGTH} characters", field="body"
            )

        job = await self.load_job(actor, job_id, Operation.POST_MESSAGE)

        async with self.storage("post_message"):
            message = await message_crud.post(self.db, job.id, actor.id, text)
            await self.db.commit()

        view = _message_view(message, actor.display_name, actor.role)
        logger.info(
            "Message posted",
            extra={"job_id": str(job.id), "message_id": str(message.id)},
        )

        self.publish(
            RoomEvent(
                event=EventType.NEW_MESSAGE,
                room=job_room(job.id),
                job_id=job.id,
                data={
                    "message_id": str(message.id),
                    "author_id": str(actor.id),
                    "author_name": actor.display_name,
                    "author_role": actor.role.value,
                    "body": message.body,
                    "created_at": message.created_at.isoformat(),
                },
            )
        )
        self.notify(
            SinkEvent(
                event_type=SinkEventType.MESSAGE_POSTED,
                job_id=job.id,
                actor_display_name=actor.display_name,
                payload={"message_id": str(message.id), "author_role": actor.role.value},
            )
        )
        return view

    async def list_messages(self, actor: Actor | None, job_id: UUID) -> list[dict[str, Any]]:
        """
        Read a job's thread oldest first.

        Returns:
            list[dict]: Message views
        """
        job = await self.load_job(actor, job_id, Operation.READ_MESSAGES)

        async with self.storage("list_messages"):
            rows = await message_crud.list_with_authors(self.db, job.id)

        return [_message_view(message, author.shown_name, author.role) for message, author in rows]
