"""
Shared test fixtures and configuration for entire test suite.

Provides: SQLite engines and sessions, user/job factories, event hub and
recording sink, recording WebSocket-style subscribers
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import asyncio
import contextlib
import uuid
from typing import Any

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

from tuning_backend.boundary.db import models  # noqa: F401
from tuning_backend.boundary.db.base import Base
from tuning_backend.boundary.db.CRUD.job_crud import job_crud
from tuning_backend.boundary.db.CRUD.user_crud import user_crud
from tuning_backend.boundary.db.models.job_model import JobModel, JobStatus
from tuning_backend.boundary.db.models.user_model import UserModel, UserRole
from tuning_backend.core.actor import Actor
from tuning_backend.core.events.hub import Connection, EventHub
from tuning_backend.core.events.sink import SinkDispatcher
from tuning_backend.models.events import SinkEvent


@pytest.fixture
async def test_engine():
    """
    Create in-memory SQLite async engine with all tables.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the in-memory engine."""
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest.fixture
async def test_async_db(session_factory):
    """
    Create in-memory SQLite async database session for testing.

    Yields:
        AsyncSession: Test database session with cleanup
    """
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def file_session_factory(tmp_path):
    """
    Session factory on a file-backed SQLite database.

    NullPool gives every session its own connection, so concurrent
    sessions contend for the database the way separate requests do.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'concurrency.db'}",
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, autoflush=False, expire_on_commit=False)

    await engine.dispose()


async def _create_user(
    factory: async_sessionmaker[AsyncSession],
    role: UserRole,
    email: str | None,
    display_name: str | None,
) -> UserModel:
    async with factory() as db:
        user = await user_crud.create(
            db,
            email=email or f"{uuid.uuid4().hex[:10]}@example.com",
            role=role,
            display_name=display_name,
        )
        await db.commit()
        return user


async def _create_job(
    factory: async_sessionmaker[AsyncSession],
    owner: UserModel,
    status: JobStatus,
    original_filename: str,
    options: dict[str, Any] | None,
) -> JobModel:
    async with factory() as db:
        job = await job_crud.create_job(
            db,
            owner_id=owner.id,
            original_filename=original_filename,
            stored_filename=f"{uuid.uuid4().hex}.bin",
            options=options or {"dpf_off": True},
            notes="initial notes",
        )
        if status is not JobStatus.PENDING:
            fields = {"processed_filename": "processed.bin"} if status is JobStatus.COMPLETED else {}
            job = await job_crud.transition(db, job.id, JobStatus.PENDING, status, **fields)
        await db.commit()
        return job


@pytest.fixture
def make_user(session_factory):
    """Factory creating committed users in the in-memory database."""

    async def _make(
        role: UserRole = UserRole.REQUESTER,
        email: str | None = None,
        display_name: str | None = None,
    ) -> UserModel:
        return await _create_user(session_factory, role, email, display_name)

    return _make


@pytest.fixture
def make_job(session_factory):
    """Factory creating committed jobs in the in-memory database."""

    async def _make(
        owner: UserModel,
        status: JobStatus = JobStatus.PENDING,
        original_filename: str = "map.bin",
        options: dict[str, Any] | None = None,
    ) -> JobModel:
        return await _create_job(session_factory, owner, status, original_filename, options)

    return _make


@pytest.fixture
def make_file_user(file_session_factory):
    """Factory creating users in the file-backed database."""

    async def _make(role: UserRole = UserRole.REQUESTER, display_name: str | None = None) -> UserModel:
        return await _create_user(file_session_factory, role, None, display_name)

    return _make


@pytest.fixture
def make_file_job(file_session_factory):
    """Factory creating jobs in the file-backed database."""

    async def _make(owner: UserModel, status: JobStatus = JobStatus.PENDING) -> JobModel:
        return await _create_job(file_session_factory, owner, status, "map.bin", None)

    return _make


@pytest.fixture
async def requester(make_user) -> UserModel:
    return await make_user(UserRole.REQUESTER, email="alice@example.com", display_name="Alice")


@pytest.fixture
async def other_requester(make_user) -> UserModel:
    return await make_user(UserRole.REQUESTER, email="bob@example.com", display_name="Bob")


@pytest.fixture
async def operator(make_user) -> UserModel:
    return await make_user(UserRole.OPERATOR, email="admin@example.com", display_name="Operator")


@pytest.fixture
def requester_actor(requester) -> Actor:
    return Actor.from_user(requester)


@pytest.fixture
def other_actor(other_requester) -> Actor:
    return Actor.from_user(other_requester)


@pytest.fixture
def operator_actor(operator) -> Actor:
    return Actor.from_user(operator)


class RecordingSink:
    """Event sink that keeps everything it is given."""

    def __init__(self) -> None:
        self.events: list[SinkEvent] = []
        self.closed = False

    async def emit(self, event: SinkEvent) -> None:
        self.events.append(event)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def hub() -> EventHub:
    return EventHub()


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def notifier(recording_sink) -> SinkDispatcher:
    return SinkDispatcher(recording_sink)


class RecordingClient:
    """A hub connection whose outbound frames are collected in a list."""

    def __init__(self, user_id: uuid.UUID | None = None, eligibility=None, queue_size: int = 256) -> None:
        self.frames: list[dict[str, Any]] = []
        self.connection = Connection(
            user_id=user_id,
            send=self._send,
            eligibility=eligibility,
            queue_size=queue_size,
        )
        self._task: asyncio.Task | None = None

    async def _send(self, frame: dict[str, Any]) -> None:
        self.frames.append(frame)

    def start(self) -> "RecordingClient":
        self._task = asyncio.create_task(self.connection.run())
        return self

    async def settle(self) -> None:
        """Wait until every queued frame has been handled."""
        await asyncio.wait_for(self.connection.flush(), timeout=2)

    @property
    def events(self) -> list[str]:
        return [frame["event"] for frame in self.frames]

    async def stop(self) -> None:
        self.connection.close()
        if self._task is not None:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task


@pytest.fixture
async def recording_client():
    """Factory for started RecordingClients, stopped at teardown."""
    clients: list[RecordingClient] = []

    def _make(user_id: uuid.UUID | None = None, eligibility=None, queue_size: int = 256) -> RecordingClient:
        client = RecordingClient(user_id, eligibility, queue_size).start()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        await client.stop()
