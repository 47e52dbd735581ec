"""
Problem-report rules.

A report can be filed only against a completed job with no open report;
only the single open report can be resolved. Resolved reports stay
resolved; a new report is filed instead.

Dependencies: tuning_backend.boundary.db.models, tuning_backend.core.exceptions
System role: Problem-report sub-lifecycle rules
"""

from typing import Any

from tuning_backend.boundary.db.models.job_model import JobStatus
from tuning_backend.boundary.db.models.problem_report_model import ProblemStatus
from tuning_backend.core.exceptions import (
    NoOpenReportError,
    NotCompletedError,
    ReportAlreadyOpenError,
    ValidationError,
)

MAX_DESCRIPTION_LENGTH = 5000


def ensure_can_file(job_id: Any, job_status: JobStatus, open_report: Any | None) -> None:
    """
    Check filing preconditions in order: job completed, then no open report.

    Raises:
        NotCompletedError: Job is not completed
        ReportAlreadyOpenError: A report is already open (carries it)
    """
    if job_status is not JobStatus.COMPLETED:
        raise NotCompletedError(
            "Problems can only be reported on completed jobs",
            job_id=job_id,
            status=job_status.value,
        )
    if open_report is not None:
        raise ReportAlreadyOpenError(open_report)


def ensure_can_resolve(job_id: Any, open_report: Any | None) -> None:
    """
    Raises:
        NoOpenReportError: Nothing to resolve
    """
    if open_report is None or open_report.status is not ProblemStatus.OPEN:
        raise NoOpenReportError(job_id)


def clean_description(description: str | None) -> str:
    """
    Normalize a problem description.

    Raises:
        ValidationError: Description exceeds MAX_DESCRIPTION_LENGTH
    """
    text = (description or "").strip()
    if len(text) > MAX_DESCRIPTION_LENGTH:
        raise ValidationError(
            f"Description exceeds {MAX_DESCRIPTION_LENGTH} characters",
            field="description",
        )
    return text
