"""
Realtime service.

Gates room joins and checks, per delivered event, that a subscriber is
still entitled to it. Each check opens a short-lived session so the
decision reads current role and ownership rather than what was true at
join time.

Dependencies: sqlalchemy, tuning_backend.core
System role: Room admission and delivery eligibility for WebSocket sessions
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tuning_backend.boundary.db.CRUD.job_crud import job_crud
from tuning_backend.boundary.db.CRUD.user_crud import user_crud
from tuning_backend.boundary.db.models.job_model import JobModel
from tuning_backend.core.access_policy import Operation, authorize
from tuning_backend.core.actor import Actor
from tuning_backend.core.events.hub import Connection, EventHub
from tuning_backend.core.events.rooms import OPERATOR_ROOM, job_room, parse_job_room
from tuning_backend.models.events import RoomEvent

logger = logging.getLogger(__name__)


class RealtimeService:
    """Room admission and delivery eligibility."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        hub: EventHub,
    ) -> None:
        self.session_factory = session_factory
        self.hub = hub

    async def resolve_actor(self, user_id: UUID | None) -> Actor | None:
        async with self.session_factory() as db:
            return await self._actor(db, user_id)

    async def join_job_room(self, connection: Connection, job_id: UUID) -> bool:
        """
        Add the connection to a job's room if its user may view the job.

        Returns:
            bool: True if the connection is a member afterwards
        """
        if not connection.authenticated:
            return False

        async with self.session_factory() as db:
            actor, job = await self._actor_and_job(db, connection.user_id, job_id)

        if job is None or not authorize(actor, Operation.JOIN_JOB_ROOM, job):
            logger.info(
                "Job room join refused",
                extra={"connection_id": connection.id, "job_id": str(job_id)},
            )
            return False

        self.hub.join(connection, job_room(job_id))
        return True

    async def join_operator_room(self, connection: Connection) -> bool:
        """Add the connection to the operator room if its user is the operator."""
        if not connection.authenticated:
            return False

        actor = await self.resolve_actor(connection.user_id)
        if not authorize(actor, Operation.JOIN_OPERATOR_ROOM):
            logger.info(
                "Operator room join refused",
                extra={"connection_id": connection.id},
            )
            return False

        self.hub.join(connection, OPERATOR_ROOM)
        return True

    def leave_room(self, connection: Connection, room: str) -> bool:
        return self.hub.leave(connection, room)

    async def is_eligible(self, connection: Connection, event: RoomEvent) -> bool:
        """
        Re-check a subscriber's entitlement to one event.

        A subscriber that lost access is removed from the room.
        """
        async with self.session_factory() as db:
            if event.room == OPERATOR_ROOM:
                actor = await self._actor(db, connection.user_id)
                allowed = bool(authorize(actor, Operation.JOIN_OPERATOR_ROOM))
            else:
                job_id = parse_job_room(event.room)
                if job_id is None:
                    allowed = False
                else:
                    actor, job = await self._actor_and_job(db, connection.user_id, job_id)
                    allowed = job is not None and bool(
                        authorize(actor, Operation.JOIN_JOB_ROOM, job)
                    )

        if not allowed:
            logger.info(
                "Subscriber no longer eligible, removing from room",
                extra={"connection_id": connection.id, "room": event.room},
            )
            self.hub.leave(connection, event.room)
        return allowed

    async def _actor(self, db: AsyncSession, user_id: UUID | None) -> Actor | None:
        if user_id is None:
            return None
        user = await user_crud.get_by_id(db, user_id)
        return Actor.from_user(user) if user is not None else None

    async def _actor_and_job(
        self,
        db: AsyncSession,
        user_id: UUID | None,
        job_id: UUID,
    ) -> tuple[Actor | None, JobModel | None]:
        actor = await self._actor(db, user_id)
        job = await job_crud.get_by_id(db, job_id) if actor is not None else None
        return actor, job
