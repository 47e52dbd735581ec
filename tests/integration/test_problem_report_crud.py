"""
Test suite for ProblemReportCRUD database operations.

Covers filing preconditions, the one-open-report index and resolution.
"""

import uuid

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tuning_backend.boundary.db.CRUD.problem_report_crud import problem_report_crud
from tuning_backend.boundary.db.models.job_model import JobStatus
from tuning_backend.boundary.db.models.problem_report_model import (
    ProblemReportModel,
    ProblemStatus,
)
from tuning_backend.core.exceptions import (
    NoOpenReportError,
    NotCompletedError,
    NotFoundError,
    ReportAlreadyOpenError,
)


class TestFile:
    """Test suite for ProblemReportCRUD.file()."""

    @pytest.mark.asyncio
    async def test_file_should_create_open_report(
        self, test_async_db: AsyncSession, make_job, requester
    ) -> None:
        # Arrange
        job = await make_job(requester, status=JobStatus.COMPLETED)

        # Act
        report = await problem_report_crud.file(test_async_db, job.id, requester.id, "rough idle")

        # Assert
        assert report.status is ProblemStatus.OPEN
        assert report.reporter_id == requester.id
        assert report.resolved_at is None

    @pytest.mark.asyncio
    async def test_file_should_reject_pending_job(
        self, test_async_db: AsyncSession, make_job, requester
    ) -> None:
        job = await make_job(requester)

        with pytest.raises(NotCompletedError):
            await problem_report_crud.file(test_async_db, job.id, requester.id, "too early")

    @pytest.mark.asyncio
    async def test_file_should_reject_missing_job(self, test_async_db: AsyncSession, requester) -> None:
        with pytest.raises(NotFoundError):
            await problem_report_crud.file(test_async_db, uuid.uuid4(), requester.id, "ghost")

    @pytest.mark.asyncio
    async def test_second_file_should_return_existing_report(
        self, test_async_db: AsyncSession, make_job, requester
    ) -> None:
        # Arrange
        job = await make_job(requester, status=JobStatus.COMPLETED)
        first = await problem_report_crud.file(test_async_db, job.id, requester.id, "first")
        await test_async_db.commit()

        # Act
        with pytest.raises(ReportAlreadyOpenError) as exc_info:
            await problem_report_crud.file(test_async_db, job.id, requester.id, "second")

        # Assert
        assert exc_info.value.report.id == first.id
        reports = await problem_report_crud.list_for_job(test_async_db, job.id)
        assert len(reports) == 1

    @pytest.mark.asyncio
    async def test_index_should_reject_second_open_row(
        self, test_async_db: AsyncSession, make_job, requester
    ) -> None:
        # Arrange
        job = await make_job(requester, status=JobStatus.COMPLETED)
        await problem_report_crud.file(test_async_db, job.id, requester.id, "first")

        # Act / Assert
        test_async_db.add(
            ProblemReportModel(job_id=job.id, reporter_id=requester.id, description="raw insert")
        )
        with pytest.raises(IntegrityError):
            await test_async_db.flush()


class TestResolve:
    """Test suite for ProblemReportCRUD.resolve()."""

    @pytest.mark.asyncio
    async def test_resolve_should_stamp_resolution(
        self, test_async_db: AsyncSession, make_job, requester
    ) -> None:
        # Arrange
        job = await make_job(requester, status=JobStatus.COMPLETED)
        await problem_report_crud.file(test_async_db, job.id, requester.id, "issue")

        # Act
        resolved = await problem_report_crud.resolve(test_async_db, job.id)

        # Assert
        assert resolved.status is ProblemStatus.RESOLVED
        assert resolved.resolved_at is not None
        assert await problem_report_crud.get_open_for_job(test_async_db, job.id) is None

    @pytest.mark.asyncio
    async def test_resolve_without_open_report_should_fail(
        self, test_async_db: AsyncSession, make_job, requester
    ) -> None:
        job = await make_job(requester, status=JobStatus.COMPLETED)

        with pytest.raises(NoOpenReportError):
            await problem_report_crud.resolve(test_async_db, job.id)

    @pytest.mark.asyncio
    async def test_new_report_should_be_allowed_after_resolution(
        self, test_async_db: AsyncSession, make_job, requester
    ) -> None:
        # Arrange
        job = await make_job(requester, status=JobStatus.COMPLETED)
        first = await problem_report_crud.file(test_async_db, job.id, requester.id, "first")
        await problem_report_crud.resolve(test_async_db, job.id)

        # Act
        second = await problem_report_crud.file(test_async_db, job.id, requester.id, "again")

        # Assert
        assert second.id != first.id
        reports = await problem_report_crud.list_for_job(test_async_db, job.id)
        assert [report.status for report in reports] == [ProblemStatus.RESOLVED, ProblemStatus.OPEN]
