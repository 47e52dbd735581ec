"""
Exception hierarchy for the tuning job service.

Provides layered exception structure for domain-specific errors. Every
domain error carries a stable ``code`` so transports can map it without
inspecting messages. All exceptions include context for observability.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class TuningServiceError(Exception):
    """Base exception for all tuning service errors."""

    code: str = "error"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ForbiddenError(TuningServiceError):
    """Raised when the actor is not allowed to perform the operation."""

    code = "forbidden"

    def __init__(
        self,
        message: str = "Forbidden",
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class NotFoundError(TuningServiceError):
    """
    Raised when an entity is missing or not visible to the actor.

    The two cases are deliberately indistinguishable.
    """

    code = "not_found"

    def __init__(
        self,
        entity: str,
        entity_id: Any,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details[f"{entity}_id"] = str(entity_id)
        super().__init__(f"{entity.capitalize()} not found: {entity_id}", details)


class JobStateError(TuningServiceError):
    """Base for errors raised by the job lifecycle."""

    def __init__(
        self,
        message: str,
        job_id: Any = None,
        status: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if job_id is not None:
            details["job_id"] = str(job_id)
        if status is not None:
            details["status"] = status
        super().__init__(message, details)


class ImmutableStateError(JobStateError):
    """Raised when a job is edited outside the pending window."""

    code = "immutable_state"


class InvalidTransitionError(JobStateError):
    """Raised when a status transition is not allowed from the current state."""

    code = "invalid_transition"


class NotCompletedError(JobStateError):
    """Raised when a problem is filed against a job that is not completed."""

    code = "not_completed"


class FileNotReadyError(JobStateError):
    """Raised when the processed file is requested before completion."""

    code = "not_ready"


class ReportAlreadyOpenError(TuningServiceError):
    """
    Raised when a problem is filed while another report is still open.

    Carries the existing open report so callers can route back to it.
    """

    code = "report_already_open"

    def __init__(self, report: Any, details: dict[str, Any] | None = None) -> None:
        self.report = report
        details = details or {}
        details["report_id"] = str(report.id)
        details["job_id"] = str(report.job_id)
        super().__init__("A problem report is already open for this job", details)


class NoOpenReportError(TuningServiceError):
    """Raised when resolving a job that has no open problem report."""

    code = "no_open_report"

    def __init__(self, job_id: Any, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["job_id"] = str(job_id)
        super().__init__(f"No open problem report for job {job_id}", details)


class ValidationError(TuningServiceError):
    """Raised when input validation fails."""

    code = "validation_error"

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class PersistenceError(TuningServiceError):
    """
    Raised when the database is unreachable or fails unexpectedly.

    The only category treated as a system fault.
    """

    code = "persistence_failure"

    def __init__(
        self,
        message: str = "Storage failure",
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)
