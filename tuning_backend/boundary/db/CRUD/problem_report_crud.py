"""
Problem report CRUD operations.

Filing and resolution of problem reports. The partial unique index on
open reports is the final arbiter when two filers race.

Dependencies: sqlalchemy, tuning_backend.boundary.db.models, tuning_backend.core
System role: Problem-report persistence
"""

import logging
from typing import Sequence
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tuning_backend.boundary.db.base import utcnow
from tuning_backend.boundary.db.CRUD.base_crud import BaseCRUD
from tuning_backend.boundary.db.CRUD.job_crud import job_crud
from tuning_backend.boundary.db.models.problem_report_model import (
    ProblemReportModel,
    ProblemStatus,
)
from tuning_backend.core.exceptions import (
    NoOpenReportError,
    NotFoundError,
    ReportAlreadyOpenError,
)
from tuning_backend.core.problem_rules import ensure_can_file, ensure_can_resolve

logger = logging.getLogger(__name__)


class ProblemReportCRUD(BaseCRUD[ProblemReportModel]):
    """CRUD operations for ProblemReportModel."""

    def __init__(self) -> None:
        """Initialize ProblemReportCRUD with ProblemReportModel."""
        super().__init__(ProblemReportModel)

    async def get_open_for_job(
        self,
        session: AsyncSession,
        job_id: UUID,
    ) -> ProblemReportModel | None:
        """Return the open report for a job, if any."""
        stmt = (
            select(ProblemReportModel)
            .where(
                ProblemReportModel.job_id == job_id,
                ProblemReportModel.status == ProblemStatus.OPEN,
            )
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_job(
        self,
        session: AsyncSession,
        job_id: UUID,
    ) -> Sequence[ProblemReportModel]:
        """List all reports of a job, oldest first."""
        stmt = (
            select(ProblemReportModel)
            .where(ProblemReportModel.job_id == job_id)
            .order_by(ProblemReportModel.created_at.asc(), ProblemReportModel.id)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def file(
        self,
        session: AsyncSession,
        job_id: UUID,
        reporter_id: UUID,
        description: str,
    ) -> ProblemReportModel:
        """
        File a new open report against a completed job.

        On a lost race the session's transaction is rolled back before the
        winning report is read back, so call this as the only write of its
        unit of work.

        Args:
            session: Async database session
            job_id: Job UUID
            reporter_id: Filing user
            description: Problem description

        Returns:
            Created ProblemReportModel (status=OPEN)

        Raises:
            NotFoundError: Job does not exist
            NotCompletedError: Job status is not COMPLETED
            ReportAlreadyOpenError: An open report exists (carries it)
        """
        job = await job_crud.get_by_id(session, job_id)
        if job is None:
            raise NotFoundError("job", job_id)

        existing = await self.get_open_for_job(session, job_id)
        ensure_can_file(job_id, job.status, existing)

        try:
            return await self.create(
                session,
                job_id=job_id,
                reporter_id=reporter_id,
                description=description,
                status=ProblemStatus.OPEN,
            )
        except IntegrityError:
            await session.rollback()
            existing = await self.get_open_for_job(session, job_id)
            if existing is None:
                raise
            logger.info(
                "Concurrent problem filing lost the race",
                extra={"job_id": str(job_id), "report_id": str(existing.id)},
            )
            raise ReportAlreadyOpenError(existing)

    async def resolve(
        self,
        session: AsyncSession,
        job_id: UUID,
    ) -> ProblemReportModel:
        """
        Resolve the open report of a job.

        Args:
            session: Async database session
            job_id: Job UUID

        Returns:
            Resolved ProblemReportModel with resolved_at stamped

        Raises:
            NoOpenReportError: No report is open (or it was resolved concurrently)
        """
        existing = await self.get_open_for_job(session, job_id)
        ensure_can_resolve(job_id, existing)

        stmt = (
            update(ProblemReportModel)
            .where(
                ProblemReportModel.id == existing.id,
                ProblemReportModel.status == ProblemStatus.OPEN,
            )
            .values(status=ProblemStatus.RESOLVED, resolved_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        if result.rowcount == 0:
            raise NoOpenReportError(job_id)

        return await self.get_by_id(session, existing.id)


problem_report_crud = ProblemReportCRUD()
