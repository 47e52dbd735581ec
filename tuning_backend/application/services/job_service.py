"""
Job service orchestrator.

Coordinates the job lifecycle: submission, owner edits while pending,
operator completion/cancellation, the operator message, listing and
download naming.

Dependencies: tuning_backend.boundary.db.CRUD, tuning_backend.core
System role: Job lifecycle orchestration
"""

import logging
from typing import Literal, Sequence
from uuid import UUID

from tuning_backend.application.services.base_service import BaseService
from tuning_backend.boundary.db.CRUD.job_crud import job_crud
from tuning_backend.boundary.db.models.job_model import JobModel, JobStatus
from tuning_backend.core.access_policy import Operation, require
from tuning_backend.core.actor import Actor
from tuning_backend.core.events.rooms import OPERATOR_ROOM, job_room
from tuning_backend.core.exceptions import FileNotReadyError
from tuning_backend.core.filenames import derive_download_name
from tuning_backend.core.job_state_machine import completion_fields, ensure_transition
from tuning_backend.models.events import EventType, RoomEvent, SinkEvent, SinkEventType
from tuning_backend.models.job import (
    DownloadResponse,
    EditJobRequest,
    SubmitJobRequest,
)

logger = logging.getLogger(__name__)

DownloadKind = Literal["original", "processed"]


class JobService(BaseService):
    """Job service orchestrator."""

    async def submit_job(self, actor: Actor | None, request: SubmitJobRequest) -> JobModel:
        """
        Create a pending job for the requester.

        Args:
            actor: Submitting requester
            request: File references, options, notes and vehicle fields

        Returns:
            JobModel: Created job (status=PENDING)

        Raises:
            ForbiddenError: Not an authenticated requester
        """
        require(actor, Operation.SUBMIT_JOB)

        async with self.storage("submit_job"):
            job = await job_crud.create_job(
                self.db,
                owner_id=actor.id,
                original_filename=request.original_filename,
                stored_filename=request.stored_filename,
                options=request.options.model_dump(),
                notes=request.notes,
                vehicle=request.model_dump(
                    include={"vehicle_make", "vehicle_model", "vehicle_year", "ecu_controller"}
                ),
            )
            await self.db.commit()

        logger.info(
            "Job submitted",
            extra={"job_id": str(job.id), "user_id": str(actor.id)},
        )

        self.publish(
            RoomEvent(
                event=EventType.NEW_JOB,
                room=OPERATOR_ROOM,
                job_id=job.id,
                data={
                    "original_filename": job.original_filename,
                    "owner_name": actor.display_name,
                    "status": job.status.value,
                },
            )
        )
        self.notify(
            SinkEvent(
                event_type=SinkEventType.JOB_CREATED,
                job_id=job.id,
                actor_display_name=actor.display_name,
                payload={"original_filename": job.original_filename},
            )
        )
        return job

    async def get_job(self, actor: Actor | None, job_id: UUID) -> JobModel:
        """
        Get one job visible to the actor.

        Raises:
            ForbiddenError: Unauthenticated
            NotFoundError: Missing or not visible
        """
        return await self.load_job(actor, job_id, Operation.VIEW_JOB)

    async def list_jobs(self, actor: Actor | None) -> Sequence[tuple[JobModel, str]]:
        """
        List jobs newest first: all jobs for the operator, own jobs otherwise.

        Returns:
            Sequence of (JobModel, owner_email)
        """
        require(actor, Operation.LIST_JOBS)
        owner_scope = None if actor.is_operator else actor.id
        async with self.storage("list_jobs"):
            return await job_crud.list_jobs(self.db, owner_scope)

    async def edit_job(
        self,
        actor: Actor | None,
        job_id: UUID,
        request: EditJobRequest,
    ) -> JobModel:
        """
        Apply a partial edit to a pending job owned by the actor.

        Fields absent from the request keep their stored values; options are
        merged into the stored option set.

        Raises:
            NotFoundError: Missing or not owned
            ImmutableStateError: Job is no longer pending
        """
        current = await self.load_job(actor, job_id, Operation.EDIT_JOB)

        changes = request.model_dump(exclude_unset=True)
        if "options" in changes:
            changes["options"] = {**(current.options or {}), **(changes["options"] or {})}
        if "notes" in changes and changes["notes"] is None:
            changes["notes"] = ""

        async with self.storage("edit_job"):
            job = await job_crud.update_if_pending(self.db, job_id, actor.id, **changes)
            await self.db.commit()

        logger.info("Job edited", extra={"job_id": str(job_id)})
        self.publish(
            RoomEvent(
                event=EventType.JOB_UPDATED,
                room=job_room(job.id),
                job_id=job.id,
                data={"status": job.status.value, "updated_at": job.updated_at.isoformat()},
            )
        )
        return job

    async def complete_job(
        self,
        actor: Actor | None,
        job_id: UUID,
        processed_filename: str | None,
    ) -> JobModel:
        """
        Complete a pending job with the processed file reference.

        Raises:
            ForbiddenError: Not the operator
            ValidationError: No processed file reference
            InvalidTransitionError: Job is not pending
        """
        job = await self.load_job(actor, job_id, Operation.COMPLETE_JOB)
        fields = completion_fields(processed_filename)
        return await self._transition(job, JobStatus.COMPLETED, **fields)

    async def cancel_job(self, actor: Actor | None, job_id: UUID) -> JobModel:
        """
        Cancel a pending job.

        Raises:
            ForbiddenError: Not the operator
            InvalidTransitionError: Job is not pending
        """
        job = await self.load_job(actor, job_id, Operation.CANCEL_JOB)
        return await self._transition(job, JobStatus.CANCELLED)

    async def set_operator_message(
        self,
        actor: Actor | None,
        job_id: UUID,
        message: str,
    ) -> JobModel:
        """Set the operator's message to the requester; allowed at any status."""
        await self.load_job(actor, job_id, Operation.SET_OPERATOR_MESSAGE)

        async with self.storage("set_operator_message"):
            job = await job_crud.set_client_message(self.db, job_id, message.strip())
            await self.db.commit()

        self.publish(
            RoomEvent(
                event=EventType.JOB_UPDATED,
                room=job_room(job.id),
                job_id=job.id,
                data={"status": job.status.value, "client_message": job.client_message},
            )
        )
        return job

    async def get_download(
        self,
        actor: Actor | None,
        job_id: UUID,
        kind: DownloadKind,
    ) -> DownloadResponse:
        """
        Resolve the storage reference and display name of a job file.

        The original file is operator-only and keeps its uploaded name. The
        processed file is offered to the owner and the operator under the
        derived name.

        Raises:
            FileNotReadyError: Processed file requested before completion
        """
        if kind == "original":
            job = await self.load_job(actor, job_id, Operation.DOWNLOAD_ORIGINAL)
            return DownloadResponse(
                stored_filename=job.stored_filename,
                download_name=job.original_filename,
            )

        job = await self.load_job(actor, job_id, Operation.DOWNLOAD_PROCESSED)
        if not job.processed_filename:
            raise FileNotReadyError(
                "Processed file is not available yet",
                job_id=job.id,
                status=job.status.value,
            )
        return DownloadResponse(
            stored_filename=job.processed_filename,
            download_name=derive_download_name(job.original_filename, job.options),
        )

    async def _transition(self, job: JobModel, target: JobStatus, **fields) -> JobModel:
        ensure_transition(job.id, job.status, target)
        previous = job.status

        async with self.storage(f"transition_to_{target.value}"):
            updated = await job_crud.transition(self.db, job.id, previous, target, **fields)
            await self.db.commit()

        logger.info(
            "Job status changed",
            extra={"job_id": str(job.id), "from_status": previous.value, "to_status": target.value},
        )
        self.publish(
            RoomEvent(
                event=EventType.JOB_STATUS_CHANGED,
                room=job_room(updated.id),
                job_id=updated.id,
                data={"status": updated.status.value, "updated_at": updated.updated_at.isoformat()},
            )
        )
        return updated
