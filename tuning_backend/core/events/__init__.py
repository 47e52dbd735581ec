"""
Real-time event distribution.

Exports:
  - EventHub, Connection: Room membership and per-connection delivery
  - job_room, OPERATOR_ROOM: Room naming
  - EventSink, LoggingEventSink, WebhookEventSink, SinkDispatcher: Outbound notifications

Delivery is at-most-once with no persistence: an event published to a room
with no members is dropped, and clients reconcile through the read APIs.
"""

from tuning_backend.core.events.hub import Connection, EventHub
from tuning_backend.core.events.rooms import OPERATOR_ROOM, job_room, parse_job_room
from tuning_backend.core.events.sink import (
    EventSink,
    LoggingEventSink,
    SinkDispatcher,
    WebhookEventSink,
    build_event_sink,
)

__all__ = [
    "Connection",
    "EventHub",
    "EventSink",
    "LoggingEventSink",
    "OPERATOR_ROOM",
    "SinkDispatcher",
    "WebhookEventSink",
    "build_event_sink",
    "job_room",
    "parse_job_room",
]
