"""
Response mapping utilities.

Transforms ORM models and service dictionaries into Pydantic response
models. Centralizes response construction logic.

Dependencies: tuning_backend.models
System role: Response transformation
"""

from typing import Any, Sequence

from tuning_backend.boundary.db.models.job_model import JobModel
from tuning_backend.boundary.db.models.problem_report_model import ProblemReportModel
from tuning_backend.models.job import JobOptions, JobResponse
from tuning_backend.models.message import MessageListResponse, MessageResponse
from tuning_backend.models.problem import ProblemReportResponse


def map_job_to_response(job: JobModel, owner_email: str | None = None) -> JobResponse:
    """
    Transform a JobModel into JobResponse.

    The processed file's storage reference is not exposed; clients only
    learn whether it exists.

    Args:
        job: Job ORM instance
        owner_email: Owner's email, included in operator listings

    Returns:
        JobResponse: Pydantic model for API response
    """
    return JobResponse(
        id=job.id,
        user_id=job.user_id,
        owner_email=owner_email,
        original_filename=job.original_filename,
        options=JobOptions.model_validate(job.options or {}),
        notes=job.notes or "",
        status=job.status.value,
        has_processed_file=bool(job.processed_filename),
        client_message=job.client_message,
        vehicle_make=job.vehicle_make,
        vehicle_model=job.vehicle_model,
        vehicle_year=job.vehicle_year,
        ecu_controller=job.ecu_controller,
        created_at=job.created_at,
        updated_at=job.updated_at,
    )


def map_jobs_to_response(rows: Sequence[tuple[JobModel, str]]) -> list[JobResponse]:
    """
    Transform (job, owner_email) rows into a list of JobResponse.

    Args:
        rows: Listing rows from JobService.list_jobs

    Returns:
        list[JobResponse]: Pydantic models for API response
    """
    return [map_job_to_response(job, owner_email) for job, owner_email in rows]


def map_messages_to_response(messages: list[dict[str, Any]]) -> MessageListResponse:
    """Transform message views into MessageListResponse."""
    items = [MessageResponse(**message) for message in messages]
    return MessageListResponse(messages=items, total=len(items))


def map_report_to_response(report: ProblemReportModel) -> ProblemReportResponse:
    """Transform a ProblemReportModel into ProblemReportResponse."""
    return ProblemReportResponse(
        id=report.id,
        job_id=report.job_id,
        reporter_id=report.reporter_id,
        description=report.description,
        status=report.status.value,
        created_at=report.created_at,
        resolved_at=report.resolved_at,
    )
