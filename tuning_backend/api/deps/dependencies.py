"""
Dependency injection container.

Factory functions for FastAPI dependencies. The event hub and sink
dispatcher are created once in the application lifespan and read from
``app.state``; services are built per request around a request-scoped
database session.

Dependencies: tuning_backend.application, tuning_backend.boundary, tuning_backend.core
System role: DI container for service injection
"""

import logging
from uuid import UUID

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.requests import HTTPConnection

from tuning_backend.application.services import (
    JobService,
    MessageService,
    ProblemReportService,
    RealtimeService,
    UserService,
)
from tuning_backend.boundary.db import get_async_db, get_async_session_factory
from tuning_backend.core.actor import Actor
from tuning_backend.core.events.hub import EventHub
from tuning_backend.core.events.sink import SinkDispatcher

logger = logging.getLogger(__name__)

USER_ID_HEADER = "X-User-Id"


def get_event_hub(connection: HTTPConnection) -> EventHub:
    """Get the process-wide event hub (HTTP and WebSocket)."""
    return connection.app.state.event_hub


def get_sink_dispatcher(connection: HTTPConnection) -> SinkDispatcher:
    """Get the outbound sink dispatcher."""
    return connection.app.state.sink_dispatcher


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the session factory used outside request-scoped sessions."""
    return get_async_session_factory()


def get_user_service(db: AsyncSession = Depends(get_async_db)) -> UserService:
    """
    Get user service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        UserService: User service instance
    """
    return UserService(db=db)


async def get_current_actor(
    x_user_id: str | None = Header(default=None, alias=USER_ID_HEADER),
    user_service: UserService = Depends(get_user_service),
) -> Actor | None:
    """
    Resolve the calling actor from the identity header.

    The header is asserted by the upstream authentication layer. A missing,
    malformed or unknown id yields None (unauthenticated); services reject
    None as forbidden.
    """
    if not x_user_id:
        return None
    try:
        user_id = UUID(x_user_id)
    except ValueError:
        logger.info("Malformed user id header", extra={"header_value": x_user_id[:64]})
        return None
    return await user_service.get_actor(user_id)


def get_job_service(
    db: AsyncSession = Depends(get_async_db),
    hub: EventHub = Depends(get_event_hub),
    notifier: SinkDispatcher = Depends(get_sink_dispatcher),
) -> JobService:
    """
    Get job service instance.

    Args:
        db: Async database session (injected via Depends)
        hub: Event hub from app state
        notifier: Sink dispatcher from app state

    Returns:
        JobService: Job service instance
    """
    return JobService(db=db, hub=hub, notifier=notifier)


def get_message_service(
    db: AsyncSession = Depends(get_async_db),
    hub: EventHub = Depends(get_event_hub),
    notifier: SinkDispatcher = Depends(get_sink_dispatcher),
) -> MessageService:
    """Get message service instance."""
    return MessageService(db=db, hub=hub, notifier=notifier)


def get_problem_report_service(
    db: AsyncSession = Depends(get_async_db),
    hub: EventHub = Depends(get_event_hub),
    notifier: SinkDispatcher = Depends(get_sink_dispatcher),
) -> ProblemReportService:
    """Get problem report service instance."""
    return ProblemReportService(db=db, hub=hub, notifier=notifier)


def get_realtime_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    hub: EventHub = Depends(get_event_hub),
) -> RealtimeService:
    """
    Get realtime service instance.

    The service outlives any single request, so it opens its own
    short-lived sessions per check instead of taking a request session.
    """
    return RealtimeService(session_factory=session_factory, hub=hub)
