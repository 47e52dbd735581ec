"""
Access policy.

Pure predicate deciding whether an actor may perform an operation on a job.
Rules are evaluated in a fixed precedence:

1. No actor: denied.
2. Operator: allowed for every administration operation, any owner.
3. Requester: only on jobs they own, further gated by job status.
4. Anything else: denied as forbidden.

The policy only reads the target passed in; callers pass a freshly
fetched job so the decision is never made against a stale copy.

Dependencies: tuning_backend.boundary.db.models, tuning_backend.core.exceptions
System role: Authorization gate for every job, message and problem operation
"""

import enum
from dataclasses import dataclass
from typing import Any, Protocol
from uuid import UUID

from tuning_backend.boundary.db.models.job_model import JobStatus
from tuning_backend.core.actor import Actor
from tuning_backend.core.exceptions import (
    ForbiddenError,
    ImmutableStateError,
    NotCompletedError,
)


class Operation(str, enum.Enum):
    """Operations gated by the policy."""

    SUBMIT_JOB = "submit_job"
    LIST_JOBS = "list_jobs"
    VIEW_JOB = "view_job"
    EDIT_JOB = "edit_job"
    COMPLETE_JOB = "complete_job"
    CANCEL_JOB = "cancel_job"
    SET_OPERATOR_MESSAGE = "set_operator_message"
    DOWNLOAD_ORIGINAL = "download_original"
    DOWNLOAD_PROCESSED = "download_processed"
    POST_MESSAGE = "post_message"
    READ_MESSAGES = "read_messages"
    FILE_PROBLEM = "file_problem"
    RESOLVE_PROBLEM = "resolve_problem"
    VIEW_PROBLEMS = "view_problems"
    JOIN_JOB_ROOM = "join_job_room"
    JOIN_OPERATOR_ROOM = "join_operator_room"


class DenyReason(str, enum.Enum):
    """Why an operation was denied."""

    FORBIDDEN = "forbidden"
    IMMUTABLE_STATE = "immutable_state"
    NOT_COMPLETED = "not_completed"


OPERATOR_OPERATIONS = frozenset(
    {
        Operation.LIST_JOBS,
        Operation.VIEW_JOB,
        Operation.COMPLETE_JOB,
        Operation.CANCEL_JOB,
        Operation.SET_OPERATOR_MESSAGE,
        Operation.DOWNLOAD_ORIGINAL,
        Operation.DOWNLOAD_PROCESSED,
        Operation.POST_MESSAGE,
        Operation.READ_MESSAGES,
        Operation.RESOLVE_PROBLEM,
        Operation.VIEW_PROBLEMS,
        Operation.JOIN_JOB_ROOM,
        Operation.JOIN_OPERATOR_ROOM,
    }
)

# Requester operations that need no target job
REQUESTER_GLOBAL_OPERATIONS = frozenset({Operation.SUBMIT_JOB, Operation.LIST_JOBS})

# Requester operations on an owned job, with the status the job must have
REQUESTER_JOB_OPERATIONS: dict[Operation, JobStatus | None] = {
    Operation.VIEW_JOB: None,
    Operation.EDIT_JOB: JobStatus.PENDING,
    Operation.DOWNLOAD_PROCESSED: None,
    Operation.POST_MESSAGE: None,
    Operation.READ_MESSAGES: None,
    Operation.FILE_PROBLEM: JobStatus.COMPLETED,
    Operation.VIEW_PROBLEMS: None,
    Operation.JOIN_JOB_ROOM: None,
}

_STATUS_DENIALS = {
    JobStatus.PENDING: DenyReason.IMMUTABLE_STATE,
    JobStatus.COMPLETED: DenyReason.NOT_COMPLETED,
}


class JobTarget(Protocol):
    """The job fields the policy reads."""

    id: Any
    user_id: UUID
    status: JobStatus


@dataclass(frozen=True)
class Decision:
    """Outcome of an authorization check."""

    allowed: bool
    reason: DenyReason | None = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: DenyReason = DenyReason.FORBIDDEN) -> "Decision":
        return cls(allowed=False, reason=reason)

    def __bool__(self) -> bool:
        return self.allowed


def authorize(
    actor: Actor | None,
    operation: Operation,
    target: JobTarget | None = None,
) -> Decision:
    """
    Decide whether ``actor`` may perform ``operation`` on ``target``.

    Args:
        actor: Authenticated caller, or None when unauthenticated
        operation: Operation being attempted
        target: Freshly fetched job (None for job-less operations)

    Returns:
        Decision: allowed, or denied with a reason
    """
    if actor is None:
        return Decision.deny()

    if actor.is_operator:
        if operation in OPERATOR_OPERATIONS:
            return Decision.allow()
        return Decision.deny()

    if operation in REQUESTER_GLOBAL_OPERATIONS:
        return Decision.allow()

    if operation not in REQUESTER_JOB_OPERATIONS or target is None:
        return Decision.deny()

    if target.user_id != actor.id:
        return Decision.deny()

    required_status = REQUESTER_JOB_OPERATIONS[operation]
    if required_status is not None and target.status != required_status:
        return Decision.deny(_STATUS_DENIALS[required_status])

    return Decision.allow()


def require(
    actor: Actor | None,
    operation: Operation,
    target: JobTarget | None = None,
) -> None:
    """
    Authorize or raise the matching domain error.

    Raises:
        ForbiddenError: Denied as forbidden
        ImmutableStateError: Edit outside the pending window
        NotCompletedError: Problem filed on a job that is not completed
    """
    decision = authorize(actor, operation, target)
    if decision:
        return

    job_id = getattr(target, "id", None)
    status = target.status.value if target is not None else None

    if decision.reason is DenyReason.IMMUTABLE_STATE:
        raise ImmutableStateError("Only pending jobs can be edited", job_id=job_id, status=status)
    if decision.reason is DenyReason.NOT_COMPLETED:
        raise NotCompletedError(
            "Problems can only be reported on completed jobs", job_id=job_id, status=status
        )
    raise ForbiddenError(operation=operation.value)
