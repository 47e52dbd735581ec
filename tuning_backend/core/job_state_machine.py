"""
Job state machine.

Transitions are fail-closed: any move not listed in _TRANSITIONS is
rejected. pending is the only non-terminal state.

Dependencies: tuning_backend.boundary.db.models, tuning_backend.core.exceptions
System role: Job lifecycle rules
"""

from typing import Any

from tuning_backend.boundary.db.models.job_model import JobStatus
from tuning_backend.core.exceptions import (
    ImmutableStateError,
    InvalidTransitionError,
    ValidationError,
)

# Legal transitions: (from_state, to_state)
_TRANSITIONS: frozenset[tuple[JobStatus, JobStatus]] = frozenset(
    {
        (JobStatus.PENDING, JobStatus.COMPLETED),
        (JobStatus.PENDING, JobStatus.CANCELLED),
    }
)

TERMINAL_STATES = frozenset({JobStatus.COMPLETED, JobStatus.CANCELLED})


def is_terminal(status: JobStatus) -> bool:
    return status in TERMINAL_STATES


def can_transition(current: JobStatus, target: JobStatus) -> bool:
    return (current, target) in _TRANSITIONS


def ensure_transition(job_id: Any, current: JobStatus, target: JobStatus) -> None:
    """
    Reject an illegal status move.

    Raises:
        InvalidTransitionError: (current, target) is not a legal transition
    """
    if not can_transition(current, target):
        raise InvalidTransitionError(
            f"Cannot move job from {current.value} to {target.value}",
            job_id=job_id,
            status=current.value,
        )


def ensure_editable(job_id: Any, status: JobStatus) -> None:
    """
    Reject edits outside the pending window.

    Raises:
        ImmutableStateError: Job is not pending
    """
    if status is not JobStatus.PENDING:
        raise ImmutableStateError(
            "Only pending jobs can be edited",
            job_id=job_id,
            status=status.value,
        )


def completion_fields(processed_filename: str | None) -> dict[str, str]:
    """
    Columns written together with the move to COMPLETED.

    Raises:
        ValidationError: No processed file reference supplied
    """
    if not processed_filename or not processed_filename.strip():
        raise ValidationError(
            "A processed file is required to complete a job",
            field="processed_filename",
        )
    return {"processed_filename": processed_filename.strip()}
