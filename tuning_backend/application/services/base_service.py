"""
Shared plumbing for service orchestrators.

Dependencies: sqlalchemy, tuning_backend.core
System role: Transaction handling, job loading and event emission for services
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tuning_backend.boundary.db.CRUD.job_crud import job_crud
from tuning_backend.boundary.db.models.job_model import JobModel
from tuning_backend.core.access_policy import Operation, require
from tuning_backend.core.actor import Actor
from tuning_backend.core.events.hub import EventHub
from tuning_backend.core.events.sink import SinkDispatcher
from tuning_backend.core.exceptions import (
    ForbiddenError,
    NotFoundError,
    PersistenceError,
)
from tuning_backend.models.events import RoomEvent, SinkEvent

logger = logging.getLogger(__name__)


class BaseService:
    """
    Base for services that mutate jobs and emit events.

    Each public operation runs as one unit of work: read current state,
    authorize against it, write conditionally, commit, then publish. No
    event leaves the service for a write that did not commit.
    """

    def __init__(
        self,
        db: AsyncSession,
        hub: EventHub,
        notifier: SinkDispatcher,
    ) -> None:
        """
        Args:
            db: Async database session (one per request)
            hub: Process-wide event hub
            notifier: Outbound sink dispatcher
        """
        self.db = db
        self.hub = hub
        self.notifier = notifier

    @asynccontextmanager
    async def storage(self, operation: str) -> AsyncIterator[None]:
        """
        Run storage calls, converting driver failures into PersistenceError.

        Driver failures roll the transaction back. Domain errors pass
        through untouched so objects they carry stay loaded.
        """
        try:
            yield
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception(
                "Storage failure",
                extra={"operation": operation, "error_type": type(e).__name__},
            )
            raise PersistenceError(operation=operation) from e

    async def load_job(
        self,
        actor: Actor | None,
        job_id: UUID,
        operation: Operation,
    ) -> JobModel:
        """
        Fetch the current job as the actor may see it, then authorize.

        Requesters only see their own jobs; someone else's job is reported
        as not found.

        Raises:
            ForbiddenError: Unauthenticated, or operation not permitted
            NotFoundError: Job missing or not visible
            ImmutableStateError / NotCompletedError: Status gate of the operation
        """
        if actor is None:
            raise ForbiddenError(operation=operation.value)

        owner_scope = None if actor.is_operator else actor.id
        async with self.storage(operation.value):
            job = await job_crud.get_scoped(self.db, job_id, owner_scope)
        if job is None:
            raise NotFoundError("job", job_id)

        require(actor, operation, job)
        return job

    async def commit(self, operation: str) -> None:
        async with self.storage(operation):
            await self.db.commit()

    def publish(self, event: RoomEvent) -> None:
        delivered = self.hub.publish(event)
        logger.debug(
            "Room event published",
            extra={"event_type": event.event.value, "room": event.room, "delivered": delivered},
        )

    def notify(self, event: SinkEvent) -> None:
        self.notifier.dispatch(event)
