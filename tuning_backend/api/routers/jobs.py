"""
Job API endpoints.

Routes:
    POST /jobs, GET /jobs, GET /jobs/{id}, PATCH /jobs/{id},
    POST /jobs/{id}/complete, POST /jobs/{id}/cancel,
    PUT /jobs/{id}/operator-message, GET /jobs/{id}/download/{kind}

Dependencies: tuning_backend.application.services.job_service, tuning_backend.models
System role: Job lifecycle HTTP API
"""

from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, status

from tuning_backend.api.deps import get_current_actor, get_job_service
from tuning_backend.api.errors import handle_domain_errors
from tuning_backend.api.routers.responses import map_job_to_response, map_jobs_to_response
from tuning_backend.application.services.job_service import JobService
from tuning_backend.core.actor import Actor
from tuning_backend.models.job import (
    CompleteJobRequest,
    DownloadResponse,
    EditJobRequest,
    JobResponse,
    OperatorMessageRequest,
    SubmitJobRequest,
)

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.post("", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
@handle_domain_errors
async def submit_job(
    request: SubmitJobRequest,
    actor: Actor | None = Depends(get_current_actor),
    job_service: JobService = Depends(get_job_service),
) -> JobResponse:
    """
    Submit a new tuning job.

    The firmware file has already been stored; the request carries its
    storage reference and the name it was uploaded under.

    Raises:
        HTTPException(403): Not a requester
        HTTPException(422): Invalid request body
    """
    job = await job_service.submit_job(actor, request)
    return map_job_to_response(job)


@router.get("", response_model=list[JobResponse])
@handle_domain_errors
async def list_jobs(
    actor: Actor | None = Depends(get_current_actor),
    job_service: JobService = Depends(get_job_service),
) -> list[JobResponse]:
    """
    List jobs newest first.

    Requesters see their own jobs; the operator sees every job with the
    owner's email.
    """
    rows = await job_service.list_jobs(actor)
    if actor is not None and actor.is_operator:
        return map_jobs_to_response(rows)
    return [map_job_to_response(job) for job, _ in rows]


@router.get("/{job_id}", response_model=JobResponse)
@handle_domain_errors
async def get_job(
    job_id: UUID,
    actor: Actor | None = Depends(get_current_actor),
    job_service: JobService = Depends(get_job_service),
) -> JobResponse:
    """
    Get one job.

    Raises:
        HTTPException(404): Job not found or not visible to the caller
    """
    job = await job_service.get_job(actor, job_id)
    return map_job_to_response(job)


@router.patch("/{job_id}", response_model=JobResponse)
@handle_domain_errors
async def edit_job(
    job_id: UUID,
    request: EditJobRequest,
    actor: Actor | None = Depends(get_current_actor),
    job_service: JobService = Depends(get_job_service),
) -> JobResponse:
    """
    Replace the editable fields of a pending job.

    Raises:
        HTTPException(404): Job not found or not owned
        HTTPException(409): Job is no longer pending (immutable_state)
    """
    job = await job_service.edit_job(actor, job_id, request)
    return map_job_to_response(job)


@router.post("/{job_id}/complete", response_model=JobResponse)
@handle_domain_errors
async def complete_job(
    job_id: UUID,
    request: CompleteJobRequest,
    actor: Actor | None = Depends(get_current_actor),
    job_service: JobService = Depends(get_job_service),
) -> JobResponse:
    """
    Complete a pending job with its processed file.

    Raises:
        HTTPException(403): Not the operator
        HTTPException(409): Job is not pending (invalid_transition)
        HTTPException(422): Missing processed file reference
    """
    job = await job_service.complete_job(actor, job_id, request.processed_filename)
    return map_job_to_response(job)


@router.post("/{job_id}/cancel", response_model=JobResponse)
@handle_domain_errors
async def cancel_job(
    job_id: UUID,
    actor: Actor | None = Depends(get_current_actor),
    job_service: JobService = Depends(get_job_service),
) -> JobResponse:
    """
    Cancel a pending job.

    Raises:
        HTTPException(403): Not the operator
        HTTPException(409): Job is not pending (invalid_transition)
    """
    job = await job_service.cancel_job(actor, job_id)
    return map_job_to_response(job)


@router.put("/{job_id}/operator-message", response_model=JobResponse)
@handle_domain_errors
async def set_operator_message(
    job_id: UUID,
    request: OperatorMessageRequest,
    actor: Actor | None = Depends(get_current_actor),
    job_service: JobService = Depends(get_job_service),
) -> JobResponse:
    """Set the operator's message shown to the requester."""
    job = await job_service.set_operator_message(actor, job_id, request.client_message)
    return map_job_to_response(job)


@router.get("/{job_id}/download/{kind}", response_model=DownloadResponse)
@handle_domain_errors
async def get_download(
    job_id: UUID,
    kind: Literal["original", "processed"],
    actor: Actor | None = Depends(get_current_actor),
    job_service: JobService = Depends(get_job_service),
) -> DownloadResponse:
    """
    Resolve a job file's storage reference and download name.

    Byte transfer is handled by the storage layer.

    Raises:
        HTTPException(403): Original file requested by a requester
        HTTPException(409): Processed file not ready (not_ready)
    """
    return await job_service.get_download(actor, job_id, kind)
