"""
Room naming.

Dependencies: None
System role: Shared room identifiers for the hub and the WebSocket layer
"""

from uuid import UUID

OPERATOR_ROOM = "operator"
JOB_ROOM_PREFIX = "job:"


def job_room(job_id: UUID | str) -> str:
    return f"{JOB_ROOM_PREFIX}{job_id}"


def parse_job_room(room: str) -> UUID | None:
    """Return the job id of a job room name, or None for any other name."""
    if not room.startswith(JOB_ROOM_PREFIX):
        return None
    try:
        return UUID(room[len(JOB_ROOM_PREFIX):])
    except ValueError:
        return None
