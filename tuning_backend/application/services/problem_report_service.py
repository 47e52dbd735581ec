"""
Problem report service orchestrator.

A requester reports a problem with a delivered (completed) job; the
operator resolves it. At most one report per job is open at a time.

Dependencies: tuning_backend.boundary.db.CRUD, tuning_backend.core
System role: Problem-report orchestration
"""

import logging
from typing import Sequence
from uuid import UUID

from tuning_backend.application.services.base_service import BaseService
from tuning_backend.boundary.db.CRUD.problem_report_crud import problem_report_crud
from tuning_backend.boundary.db.models.problem_report_model import ProblemReportModel
from tuning_backend.core.access_policy import Operation
from tuning_backend.core.actor import Actor
from tuning_backend.core.events.rooms import OPERATOR_ROOM
from tuning_backend.core.problem_rules import clean_description
from tuning_backend.models.events import EventType, RoomEvent, SinkEvent, SinkEventType

logger = logging.getLogger(__name__)


class ProblemReportService(BaseService):
    """Problem report service orchestrator."""

    async def file_report(
        self,
        actor: Actor | None,
        job_id: UUID,
        description: str | None,
    ) -> ProblemReportModel:
        """
        File a problem against a completed job owned by the actor.

        Args:
            actor: Job owner
            job_id: Job UUID
            description: Free-text description

        Returns:
            ProblemReportModel: The new open report

        Raises:
            NotCompletedError: Job is not completed
            ReportAlreadyOpenError: A report is already open; carries that report
        """
        text = clean_description(description)
        job = await self.load_job(actor, job_id, Operation.FILE_PROBLEM)

        async with self.storage("file_problem"):
            report = await problem_report_crud.file(self.db, job.id, actor.id, text)
            await self.db.commit()

        logger.info(
            "Problem report filed",
            extra={"job_id": str(job.id), "report_id": str(report.id)},
        )

        self.publish(
            RoomEvent(
                event=EventType.PROBLEM_FILED,
                room=OPERATOR_ROOM,
                job_id=job.id,
                data={
                    "report_id": str(report.id),
                    "reporter_name": actor.display_name,
                    "original_filename": job.original_filename,
                },
            )
        )
        self.notify(
            SinkEvent(
                event_type=SinkEventType.PROBLEM_FILED,
                job_id=job.id,
                actor_display_name=actor.display_name,
                payload={"report_id": str(report.id), "original_filename": job.original_filename},
            )
        )
        return report

    async def resolve_report(self, actor: Actor | None, job_id: UUID) -> ProblemReportModel:
        """
        Resolve the open report of a job.

        Raises:
            ForbiddenError: Not the operator
            NoOpenReportError: Nothing open to resolve
        """
        job = await self.load_job(actor, job_id, Operation.RESOLVE_PROBLEM)

        async with self.storage("resolve_problem"):
            report = await problem_report_crud.resolve(self.db, job.id)
            await self.db.commit()

        logger.info(
            "Problem report resolved",
            extra={"job_id": str(job.id), "report_id": str(report.id)},
        )

        self.publish(
            RoomEvent(
                event=EventType.PROBLEM_RESOLVED,
                room=OPERATOR_ROOM,
                job_id=job.id,
                data={"report_id": str(report.id)},
            )
        )
        self.notify(
            SinkEvent(
                event_type=SinkEventType.PROBLEM_RESOLVED,
                job_id=job.id,
                actor_display_name=actor.display_name,
                payload={"report_id": str(report.id)},
            )
        )
        return report

    async def list_reports(
        self,
        actor: Actor | None,
        job_id: UUID,
    ) -> Sequence[ProblemReportModel]:
        job = await self.load_job(actor, job_id, Operation.VIEW_PROBLEMS)
        async with self.storage("list_problems"):
            return await problem_report_crud.list_for_job(self.db, job.id)
