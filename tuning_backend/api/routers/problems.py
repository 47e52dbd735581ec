"""
Problem report API endpoints.

Routes:
    GET /jobs/{id}/problems, POST /jobs/{id}/problems,
    POST /jobs/{id}/problems/resolve

Dependencies: tuning_backend.application.services.problem_report_service
System role: Problem-report HTTP API
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from tuning_backend.api.deps import get_current_actor, get_problem_report_service
from tuning_backend.api.errors import handle_domain_errors
from tuning_backend.api.routers.responses import map_report_to_response
from tuning_backend.application.services.problem_report_service import ProblemReportService
from tuning_backend.core.actor import Actor
from tuning_backend.models.problem import FileProblemRequest, ProblemReportResponse

router = APIRouter(prefix="/jobs/{job_id}/problems", tags=["problems"])


@router.get("", response_model=list[ProblemReportResponse])
@handle_domain_errors
async def list_reports(
    job_id: UUID,
    actor: Actor | None = Depends(get_current_actor),
    problem_service: ProblemReportService = Depends(get_problem_report_service),
) -> list[ProblemReportResponse]:
    """List a job's problem reports, oldest first."""
    reports = await problem_service.list_reports(actor, job_id)
    return [map_report_to_response(report) for report in reports]


@router.post("", response_model=ProblemReportResponse, status_code=status.HTTP_201_CREATED)
@handle_domain_errors
async def file_report(
    job_id: UUID,
    request: FileProblemRequest,
    actor: Actor | None = Depends(get_current_actor),
    problem_service: ProblemReportService = Depends(get_problem_report_service),
) -> ProblemReportResponse:
    """
    Report a problem with a completed job.

    Raises:
        HTTPException(409): Job not completed (not_completed), or a report is
            already open (report_already_open, body carries that report)
    """
    report = await problem_service.file_report(actor, job_id, request.description)
    return map_report_to_response(report)


@router.post("/resolve", response_model=ProblemReportResponse)
@handle_domain_errors
async def resolve_report(
    job_id: UUID,
    actor: Actor | None = Depends(get_current_actor),
    problem_service: ProblemReportService = Depends(get_problem_report_service),
) -> ProblemReportResponse:
    """
    Resolve the open problem report of a job.

    Raises:
        HTTPException(403): Not the operator
        HTTPException(409): No open report (no_open_report)
    """
    report = await problem_service.resolve_report(actor, job_id)
    return map_report_to_response(report)
