"""
Event fan-out hub.

Owns the room membership table and hands published events to every
current member of the target room. Each connection drains its own FIFO
queue, so events reach a subscriber in the order they were published to
the room. The hub is created once per process and injected where needed.

Dependencies: asyncio, threading, tuning_backend.models.events
System role: In-process pub/sub for WebSocket sessions
"""

import asyncio
import itertools
import logging
import threading
import uuid
from typing import Any, Awaitable, Callable
from uuid import UUID

from tuning_backend.models.events import RoomEvent

logger = logging.getLogger(__name__)

Sender = Callable[[dict[str, Any]], Awaitable[None]]
EligibilityCheck = Callable[["Connection", RoomEvent], Awaitable[bool]]

_CLOSE = object()


class Connection:
    """
    One connected session.

    Room events and control frames share a single outbound queue drained by
    ``run()``, so frames reach the client in enqueue order. Before a room
    event is sent, the optional eligibility check is awaited; a False
    result skips that event.

    Attributes:
        id: Connection identifier
        user_id: Authenticated user, or None for an anonymous socket
    """

    def __init__(
        self,
        user_id: UUID | None,
        send: Sender,
        eligibility: EligibilityCheck | None = None,
        queue_size: int = 256,
        connection_id: str | None = None,
    ) -> None:
        self.id = connection_id or uuid.uuid4().hex
        self.user_id = user_id
        self._send = send
        self._eligibility = eligibility
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=queue_size)
        self._closed = False

    @property
    def authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def enqueue(self, item: RoomEvent | dict[str, Any]) -> bool:
        """
        Queue a room event or a control frame without waiting.

        Returns:
            bool: False when the connection is closed or its queue is full
        """
        if self._closed:
            return False
        try:
            self._queue.put_nowait(item)
        except asyncio.QueueFull:
            logger.warning(
                "Outbound queue full, dropping frame",
                extra={"connection_id": self.id, "user_id": str(self.user_id)},
            )
            return False
        return True

    async def run(self) -> None:
        """Drain the queue until closed; send failures end the loop."""
        while True:
            item = await self._queue.get()
            try:
                if item is _CLOSE:
                    return
                if isinstance(item, RoomEvent):
                    if not await self._is_eligible(item):
                        continue
                    await self._send(item.to_dict())
                else:
                    await self._send(item)
            except Exception as e:
                logger.info(
                    "Send failed, closing connection",
                    extra={"connection_id": self.id, "error": str(e)},
                )
                self._closed = True
                return
            finally:
                self._queue.task_done()

    async def flush(self) -> None:
        """Wait until every queued frame has been processed."""
        await self._queue.join()

    def close(self) -> None:
        """Stop accepting frames and let ``run()`` exit after the backlog."""
        if self._closed:
            return
        self._closed = True
        try:
            self._queue.put_nowait(_CLOSE)
        except asyncio.QueueFull:
            pass

    async def _is_eligible(self, event: RoomEvent) -> bool:
        if self._eligibility is None:
            return True
        try:
            return await self._eligibility(self, event)
        except Exception as e:
            logger.warning(
                "Eligibility check failed, skipping event",
                extra={
                    "connection_id": self.id,
                    "room": event.room,
                    "error_type": type(e).__name__,
                    "error_msg": str(e),
                },
            )
            return False


class EventHub:
    """
    Room membership table with synchronous publication.

    Membership is guarded by a lock so join, leave, disconnect and publish
    can interleave from concurrent handlers without corrupting the table.
    Publication enqueues to every member while holding the lock, which fixes
    the per-room order to publication order.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._rooms: dict[str, set[Connection]] = {}
        self._memberships: dict[str, set[str]] = {}
        self._sequence = itertools.count(1)

    def join(self, connection: Connection, room: str) -> bool:
        """
        Add a connection to a room.

        Returns:
            bool: True if newly added
        """
        with self._lock:
            members = self._rooms.setdefault(room, set())
            if connection in members:
                return False
            members.add(connection)
            self._memberships.setdefault(connection.id, set()).add(room)
        logger.debug("Joined room", extra={"connection_id": connection.id, "room": room})
        return True

    def leave(self, connection: Connection, room: str) -> bool:
        """
        Remove a connection from a room.

        Returns:
            bool: True if it was a member
        """
        with self._lock:
            return self._remove(connection, room)

    def disconnect(self, connection: Connection) -> list[str]:
        """
        Remove a connection from every room and close it.

        Returns:
            list[str]: Rooms it was removed from
        """
        with self._lock:
            rooms = sorted(self._memberships.get(connection.id, ()))
            for room in rooms:
                self._remove(connection, room)
        connection.close()
        logger.debug(
            "Connection removed from hub",
            extra={"connection_id": connection.id, "rooms": rooms},
        )
        return rooms

    def members(self, room: str) -> frozenset[Connection]:
        with self._lock:
            return frozenset(self._rooms.get(room, ()))

    def rooms_of(self, connection: Connection) -> frozenset[str]:
        with self._lock:
            return frozenset(self._memberships.get(connection.id, ()))

    def publish(self, event: RoomEvent) -> int:
        """
        Hand an event to every current member of its room.

        Args:
            event: Event to publish (its sequence is assigned here)

        Returns:
            int: Number of connections the event was queued for
        """
        with self._lock:
            stamped = event.model_copy(update={"sequence": next(self._sequence)})
            members = list(self._rooms.get(event.room, ()))
            delivered = sum(1 for member in members if member.enqueue(stamped))

        if not members:
            logger.debug(
                "No subscribers, event dropped",
                extra={"room": event.room, "event_type": event.event.value},
            )
        return delivered

    def _remove(self, connection: Connection, room: str) -> bool:
        members = self._rooms.get(room)
        if not members or connection not in members:
            return False
        members.discard(connection)
        if not members:
            del self._rooms[room]
        rooms = self._memberships.get(connection.id)
        if rooms is not None:
            rooms.discard(room)
            if not rooms:
                del self._memberships[connection.id]
        return True
