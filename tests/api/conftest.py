"""
API test fixtures.

The app is driven in-process through httpx's ASGI transport so requests
share the test event loop and the in-memory database. The lifespan hook
is not run; hub and sink dispatcher are placed on app.state directly.
"""

import uuid

import httpx
import pytest
from fastapi import FastAPI

from tuning_backend.api.deps import get_session_factory
from tuning_backend.api.main import create_app
from tuning_backend.boundary.db import get_async_db


@pytest.fixture
def app(session_factory, hub, notifier) -> FastAPI:
    app = create_app()
    app.state.event_hub = hub
    app.state.sink_dispatcher = notifier

    async def override_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_db] = override_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    return app


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def as_user():
    """Build the identity header for a user."""

    def _headers(user_id: uuid.UUID) -> dict[str, str]:
        return {"X-User-Id": str(user_id)}

    return _headers
