"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, tuning_backend.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tuning_backend.application.services import UserService
from tuning_backend.boundary.db import get_async_engine, get_async_session_factory
from tuning_backend.boundary.db.create_tables import create_all_tables
from tuning_backend.configs import get_settings
from tuning_backend.core.events import EventHub, SinkDispatcher, build_event_sink
from tuning_backend.observability import configure_logging
from tuning_backend.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware
from .routers import (
    health_router,
    jobs_router,
    messages_router,
    problems_router,
    realtime_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Startup: configure logging, create the event hub and sink dispatcher,
    bootstrap SQLite schemas in development and make sure an operator
    account exists. Shutdown: drain in-flight sink deliveries.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    logger = logging.getLogger("uvicorn")

    # Startup
    app.state.event_hub = EventHub()
    app.state.sink_dispatcher = SinkDispatcher(build_event_sink(settings.event_sink))

    if settings.database.is_sqlite:
        await create_all_tables(get_async_engine())
        logger.info("SQLite schema ensured")

    async with get_async_session_factory()() as db:
        operator = await UserService(db).ensure_default_operator(settings.default_operator_email)
    if operator is None:
        logger.warning(
            "No operator account: %s is registered as a requester (%s)",
            settings.default_operator_email,
            settings.environment,
        )
    else:
        logger.info("Operator account ready: %s (%s)", operator.email, settings.environment)

    yield

    # Shutdown
    await app.state.sink_dispatcher.aclose()
    logger.info("Event sink drained")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    app = FastAPI(
        title="ECU Tuning Job API",
        description="Tuning job workflow between requesters and the operator",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability middleware
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(jobs_router, prefix="/api/v1")
    app.include_router(messages_router, prefix="/api/v1")
    app.include_router(problems_router, prefix="/api/v1")
    app.include_router(realtime_router)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "tuning_backend.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
