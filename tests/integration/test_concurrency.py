"""
Concurrency tests against a file-backed SQLite database.

Each contender uses its own session (its own connection), the way
concurrent requests do. The conditional updates and the one-open-report
index decide the winner.
"""

import asyncio

import pytest

from tuning_backend.application.services import (
    JobService,
    MessageService,
    ProblemReportService,
)
from tuning_backend.boundary.db.CRUD.job_crud import job_crud
from tuning_backend.boundary.db.CRUD.message_crud import message_crud
from tuning_backend.boundary.db.CRUD.problem_report_crud import problem_report_crud
from tuning_backend.boundary.db.models.job_model import JobStatus
from tuning_backend.boundary.db.models.user_model import UserRole
from tuning_backend.core.actor import Actor
from tuning_backend.core.exceptions import (
    InvalidTransitionError,
    ReportAlreadyOpenError,
)


class TestConcurrentTransitions:
    @pytest.mark.asyncio
    async def test_complete_and_cancel_should_not_both_succeed(
        self, file_session_factory, make_file_user, make_file_job, hub, notifier
    ) -> None:
        # Arrange
        owner = await make_file_user()
        operator = Actor.from_user(await make_file_user(UserRole.OPERATOR))
        job = await make_file_job(owner)

        async def complete():
            async with file_session_factory() as db:
                return await JobService(db, hub, notifier).complete_job(operator, job.id, "out.bin")

        async def cancel():
            async with file_session_factory() as db:
                return await JobService(db, hub, notifier).cancel_job(operator, job.id)

        # Act
        results = await asyncio.gather(complete(), cancel(), return_exceptions=True)

        # Assert
        successes = [result for result in results if not isinstance(result, Exception)]
        failures = [result for result in results if isinstance(result, Exception)]
        assert len(successes) == 1
        assert len(failures) == 1
        assert isinstance(failures[0], InvalidTransitionError)

        async with file_session_factory() as db:
            final = await job_crud.get_by_id(db, job.id)
        assert final.status is successes[0].status
        if final.status is JobStatus.CANCELLED:
            assert final.processed_filename is None


class TestConcurrentProblemFiling:
    @pytest.mark.asyncio
    async def test_concurrent_filers_should_leave_one_open_report(
        self, file_session_factory, make_file_user, make_file_job, hub, notifier
    ) -> None:
        # Arrange
        owner_user = await make_file_user()
        owner = Actor.from_user(owner_user)
        job = await make_file_job(owner_user, JobStatus.COMPLETED)

        async def file(description: str):
            async with file_session_factory() as db:
                return await ProblemReportService(db, hub, notifier).file_report(
                    owner, job.id, description
                )

        # Act
        results = await asyncio.gather(
            *(file(f"attempt {index}") for index in range(4)),
            return_exceptions=True,
        )

        # Assert
        created = [result for result in results if not isinstance(result, Exception)]
        rejected = [result for result in results if isinstance(result, Exception)]
        assert len(created) == 1
        assert all(isinstance(error, ReportAlreadyOpenError) for error in rejected)
        assert {error.report.id for error in rejected} <= {created[0].id}

        async with file_session_factory() as db:
            reports = await problem_report_crud.list_for_job(db, job.id)
        assert len(reports) == 1


class TestConcurrentMessages:
    @pytest.mark.asyncio
    async def test_concurrent_posts_should_all_persist(
        self, file_session_factory, make_file_user, make_file_job, hub, notifier
    ) -> None:
        # Arrange
        owner_user = await make_file_user()
        owner = Actor.from_user(owner_user)
        operator = Actor.from_user(await make_file_user(UserRole.OPERATOR))
        job = await make_file_job(owner_user)

        async def post(actor: Actor, body: str):
            async with file_session_factory() as db:
                return await MessageService(db, hub, notifier).post_message(actor, job.id, body)

        bodies = [(owner if index % 2 else operator, f"message {index}") for index in range(10)]

        # Act
        await asyncio.gather(*(post(actor, body) for actor, body in bodies))

        # Assert
        async with file_session_factory() as db:
            rows = await message_crud.list_with_authors(db, job.id)
        assert sorted(message.body for message, _ in rows) == sorted(body for _, body in bodies)
        timestamps = [message.created_at for message, _ in rows]
        assert timestamps == sorted(timestamps)
