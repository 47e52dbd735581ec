"""
Real-time and outbound event schemas.

Defines event types and payloads delivered to WebSocket rooms and to the
outbound notification sink. Payloads carry identifiers and the few
denormalized fields a client needs to render; never credentials or full
option sets.

Dependencies: pydantic
System role: Event protocol schemas
"""

from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class EventType(str, Enum):
    """Server-to-client room events."""

    NEW_JOB = "newJob"
    JOB_UPDATED = "jobUpdated"
    JOB_STATUS_CHANGED = "jobStatusChanged"
    NEW_MESSAGE = "newMessage"
    PROBLEM_FILED = "problemFiled"
    PROBLEM_RESOLVED = "problemResolved"


class ControlEventType(str, Enum):
    """Server-to-client frames about the connection itself."""

    CONNECTED = "connected"
    JOINED = "joined"
    LEFT = "left"
    PONG = "pong"
    ERROR = "error"


class ClientEventType(str, Enum):
    """Client-to-server frames."""

    JOIN_JOB = "joinJob"
    JOIN_OPERATOR = "joinOperator"
    LEAVE = "leave"
    PING = "ping"


class RoomEvent(BaseModel):
    """
    Event addressed to one room.

    Attributes:
        event: Event type identifier
        room: Target room name
        job_id: Job the event concerns
        data: Render-ready payload
        sequence: Hub-assigned publication number (0 before publication)
    """

    event: EventType
    room: str
    job_id: UUID
    data: dict[str, Any] = Field(default_factory=dict)
    sequence: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "event": self.event.value,
            "room": self.room,
            "sequence": self.sequence,
            "data": {"job_id": str(self.job_id), **self.data},
        }


class SinkEventType(str, Enum):
    """Events forwarded to the outbound notification sink."""

    JOB_CREATED = "job_created"
    PROBLEM_FILED = "problem_filed"
    PROBLEM_RESOLVED = "problem_resolved"
    MESSAGE_POSTED = "message_posted"


class SinkEvent(BaseModel):
    """
    Notification handed to the outbound sink.

    Attributes:
        event_type: What happened
        job_id: Job concerned
        actor_display_name: Who caused it
        payload: Minimal render fields
    """

    event_type: SinkEventType
    job_id: UUID
    actor_display_name: str
    payload: dict[str, Any] = Field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "eventType": self.event_type.value,
            "jobId": str(self.job_id),
            "actorDisplayName": self.actor_display_name,
            "payload": self.payload,
        }
