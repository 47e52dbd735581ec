"""
WebSocket event stream endpoint.

Delivers room events (job updates, messages, operator notifications) to
connected clients.

Routes: WS /ws/events?user_id=...

Dependencies: tuning_backend.application.services.realtime_service, tuning_backend.core.events
System role: WebSocket real-time HTTP API
"""

import asyncio
import contextlib
import json
import logging
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect

from tuning_backend.api.deps import get_realtime_service
from tuning_backend.application.services.realtime_service import RealtimeService
from tuning_backend.configs import get_settings
from tuning_backend.core.events.hub import Connection
from tuning_backend.core.events.rooms import OPERATOR_ROOM, job_room
from tuning_backend.models.events import ClientEventType, ControlEventType

logger = logging.getLogger(__name__)
router = APIRouter(tags=["realtime"])


def control_frame(event: ControlEventType, **data: Any) -> dict[str, Any]:
    return {"event": event.value, "data": data}


def error_frame(code: str, message: str) -> dict[str, Any]:
    return control_frame(ControlEventType.ERROR, code=code, message=message)


def _parse_uuid(value: Any) -> UUID | None:
    if not isinstance(value, str):
        return None
    try:
        return UUID(value)
    except ValueError:
        return None


@router.websocket("/ws/events")
async def websocket_events(
    websocket: WebSocket,
    user_id: str | None = Query(default=None),
    realtime: RealtimeService = Depends(get_realtime_service),
) -> None:
    """
    WebSocket endpoint for room events.

    Client sends:
        {"event": "joinJob", "data": {"job_id": "..."}}
        {"event": "joinOperator"}
        {"event": "leave", "data": {"room": "job:..."}}
        {"event": "ping"}

    Server sends:
        {"event": "connected", "data": {"connection_id": "...", "authenticated": true}}
        {"event": "joined", "data": {"room": "..."}}
        {"event": "left", "data": {"room": "..."}}
        {"event": "pong", "data": {}}
        {"event": "error", "data": {"code": "...", "message": "..."}}
        {"event": "<room event>", "room": "...", "sequence": n, "data": {...}}

    Joins the caller is not entitled to are ignored without a reply.

    Args:
        websocket: WebSocket connection
        user_id: Identity asserted by the upstream authentication layer
        realtime: Injected RealtimeService
    """
    await websocket.accept()

    settings = get_settings().realtime
    actor = await realtime.resolve_actor(_parse_uuid(user_id))
    connection = Connection(
        user_id=actor.id if actor is not None else None,
        send=websocket.send_json,
        eligibility=realtime.is_eligible if settings.recheck_eligibility else None,
        queue_size=settings.queue_size,
    )
    writer = asyncio.create_task(connection.run())

    logger.info(
        "WebSocket connection established",
        extra={
            "connection_id": connection.id,
            "authenticated": connection.authenticated,
            "client_host": websocket.client.host if websocket.client else None,
        },
    )
    connection.enqueue(
        control_frame(
            ControlEventType.CONNECTED,
            connection_id=connection.id,
            authenticated=connection.authenticated,
        )
    )

    try:
        while True:
            raw_data = await websocket.receive_text()

            try:
                data = json.loads(raw_data)
            except json.JSONDecodeError:
                logger.warning(
                    "Failed to parse JSON",
                    extra={"connection_id": connection.id, "raw_data_preview": raw_data[:50]},
                )
                connection.enqueue(error_frame("INVALID_JSON", "Invalid JSON format"))
                continue

            if not isinstance(data, dict):
                connection.enqueue(error_frame("INVALID_FRAME", "Frame must be a JSON object"))
                continue

            event_type = data.get("event")
            payload = data.get("data") or {}
            if not isinstance(payload, dict):
                payload = {}

            if event_type == ClientEventType.PING.value:
                connection.enqueue(control_frame(ControlEventType.PONG))

            elif event_type == ClientEventType.JOIN_JOB.value:
                job_id = _parse_uuid(payload.get("job_id"))
                if job_id is None:
                    connection.enqueue(error_frame("INVALID_JOB_ID", "job_id must be a UUID"))
                    continue
                if await realtime.join_job_room(connection, job_id):
                    connection.enqueue(control_frame(ControlEventType.JOINED, room=job_room(job_id)))

            elif event_type == ClientEventType.JOIN_OPERATOR.value:
                if await realtime.join_operator_room(connection):
                    connection.enqueue(control_frame(ControlEventType.JOINED, room=OPERATOR_ROOM))

            elif event_type == ClientEventType.LEAVE.value:
                room = payload.get("room")
                if isinstance(room, str) and realtime.leave_room(connection, room):
                    connection.enqueue(control_frame(ControlEventType.LEFT, room=room))

            else:
                logger.warning(
                    "Unknown event type received",
                    extra={"connection_id": connection.id, "event_type": str(event_type)[:50]},
                )
                connection.enqueue(
                    error_frame("UNKNOWN_EVENT", f"Unknown event type: {str(event_type)[:50]}")
                )

    except WebSocketDisconnect:
        logger.info("WebSocket client disconnected", extra={"connection_id": connection.id})
    except Exception as e:
        logger.exception(
            "Unexpected error in WebSocket handler",
            extra={
                "connection_id": connection.id,
                "error_type": type(e).__name__,
                "error_msg": str(e),
            },
        )
    finally:
        rooms = realtime.hub.disconnect(connection)
        writer.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await writer
        logger.info(
            "WebSocket session closed",
            extra={"connection_id": connection.id, "rooms": ",".join(rooms)},
        )
