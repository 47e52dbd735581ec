"""
Job CRUD operations.

Provides job persistence with conditional updates: every state-changing
write carries the expected status in its WHERE clause, so two concurrent
transitions on one job cannot both succeed.

Dependencies: sqlalchemy, tuning_backend.boundary.db.models, tuning_backend.core.exceptions
System role: Job persistence operations for the job lifecycle
"""

from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from tuning_backend.boundary.db.base import utcnow
from tuning_backend.boundary.db.CRUD.base_crud import BaseCRUD
from tuning_backend.boundary.db.models.job_model import JobModel, JobStatus
from tuning_backend.boundary.db.models.user_model import UserModel
from tuning_backend.core.exceptions import (
    ImmutableStateError,
    InvalidTransitionError,
    NotFoundError,
)

# Fields a requester may change while the job is pending
EDITABLE_FIELDS = frozenset(
    {
        "options",
        "notes",
        "vehicle_make",
        "vehicle_model",
        "vehicle_year",
        "ecu_controller",
    }
)


class JobCRUD(BaseCRUD[JobModel]):
    """
    CRUD operations for JobModel.

    Extends BaseCRUD with owner-scoped reads and status-guarded updates.
    """

    def __init__(self) -> None:
        """Initialize JobCRUD with JobModel."""
        super().__init__(JobModel)

    async def create_job(
        self,
        session: AsyncSession,
        owner_id: UUID,
        original_filename: str,
        stored_filename: str,
        options: dict[str, Any],
        notes: str = "",
        vehicle: dict[str, Any] | None = None,
    ) -> JobModel:
        """
        Insert a new pending job.

        Args:
            session: Async database session
            owner_id: Submitting requester
            original_filename: Uploaded file name
            stored_filename: Storage reference of the uploaded file
            options: Processing options
            notes: Free-text notes
            vehicle: vehicle_make/vehicle_model/vehicle_year/ecu_controller values

        Returns:
            Created JobModel with status=PENDING
        """
        return await self.create(
            session,
            user_id=owner_id,
            original_filename=original_filename,
            stored_filename=stored_filename,
            options=dict(options),
            notes=notes,
            status=JobStatus.PENDING,
            **(vehicle or {}),
        )

    async def get_scoped(
        self,
        session: AsyncSession,
        job_id: UUID,
        owner_id: UUID | None = None,
    ) -> JobModel | None:
        """
        Retrieve a job, optionally restricted to one owner.

        A job owned by someone else is reported exactly like a missing one.

        Args:
            session: Async database session
            job_id: Job UUID
            owner_id: Restrict to this owner (None for unrestricted)

        Returns:
            JobModel if visible, None otherwise
        """
        stmt = (
            select(JobModel)
            .where(JobModel.id == job_id)
            .execution_options(populate_existing=True)
        )
        if owner_id is not None:
            stmt = stmt.where(JobModel.user_id == owner_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_jobs(
        self,
        session: AsyncSession,
        owner_id: UUID | None = None,
    ) -> Sequence[tuple[JobModel, str]]:
        """
        List jobs newest first, each paired with its owner's email.

        Args:
            session: Async database session
            owner_id: Only this owner's jobs (None for all jobs)

        Returns:
            Sequence of (JobModel, owner_email) rows
        """
        stmt = (
            select(JobModel, UserModel.email)
            .join(UserModel, JobModel.user_id == UserModel.id)
            .order_by(JobModel.created_at.desc(), JobModel.id)
        )
        if owner_id is not None:
            stmt = stmt.where(JobModel.user_id == owner_id)
        result = await session.execute(stmt)
        return [(job, email) for job, email in result.all()]

    async def update_if_pending(
        self,
        session: AsyncSession,
        job_id: UUID,
        owner_id: UUID,
        **fields: Any,
    ) -> JobModel:
        """
        Update editable fields of an owner's job while it is still pending.

        Args:
            session: Async database session
            job_id: Job UUID
            owner_id: Owner the job must belong to
            **fields: Subset of EDITABLE_FIELDS

        Returns:
            Updated JobModel

        Raises:
            ValueError: If a non-editable field is passed
            NotFoundError: Job missing or owned by someone else
            ImmutableStateError: Job is no longer pending; nothing changed
        """
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields not editable: {sorted(unknown)}")

        stmt = (
            update(JobModel)
            .where(
                JobModel.id == job_id,
                JobModel.user_id == owner_id,
                JobModel.status == JobStatus.PENDING,
            )
            .values(updated_at=utcnow(), **fields)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)

        if result.rowcount == 0:
            current = await self.get_scoped(session, job_id, owner_id)
            if current is None:
                raise NotFoundError("job", job_id)
            raise ImmutableStateError(
                "Only pending jobs can be edited",
                job_id=job_id,
                status=current.status.value,
            )

        return await self.get_scoped(session, job_id, owner_id)

    async def transition(
        self,
        session: AsyncSession,
        job_id: UUID,
        from_status: JobStatus,
        to_status: JobStatus,
        **extra_fields: Any,
    ) -> JobModel:
        """
        Move a job between statuses if its current status matches.

        Args:
            session: Async database session
            job_id: Job UUID
            from_status: Status the job must currently have
            to_status: Status to set
            **extra_fields: Columns written in the same statement

        Returns:
            Updated JobModel

        Raises:
            NotFoundError: Job does not exist
            InvalidTransitionError: Current status differs from from_status
        """
        stmt = (
            update(JobModel)
            .where(JobModel.id == job_id, JobModel.status == from_status)
            .values(status=to_status, updated_at=utcnow(), **extra_fields)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)

        if result.rowcount == 0:
            current = await self.get_by_id(session, job_id)
            if current is None:
                raise NotFoundError("job", job_id)
            raise InvalidTransitionError(
                f"Cannot move job from {current.status.value} to {to_status.value}",
                job_id=job_id,
                status=current.status.value,
            )

        return await self.get_by_id(session, job_id)

    async def set_client_message(
        self,
        session: AsyncSession,
        job_id: UUID,
        message: str,
    ) -> JobModel:
        """
        Set the operator's message to the requester (any status).

        Raises:
            NotFoundError: Job does not exist
        """
        stmt = (
            update(JobModel)
            .where(JobModel.id == job_id)
            .values(client_message=message, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        if result.rowcount == 0:
            raise NotFoundError("job", job_id)
        return await self.get_by_id(session, job_id)


job_crud = JobCRUD()
