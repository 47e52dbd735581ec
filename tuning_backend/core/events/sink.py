"""
Outbound notification sink.

The core hands selected events to a sink (e.g. a push-notification
bridge) without waiting for it. Failures are logged and dropped; they
never reach the requester or operator whose action caused the event.

Dependencies: asyncio, httpx, tuning_backend.configs, tuning_backend.models.events
System role: Fire-and-forget notification bridge
"""

import asyncio
import logging
from typing import Protocol

import httpx

from tuning_backend.configs.event_sink import EventSinkSettings
from tuning_backend.models.events import SinkEvent

logger = logging.getLogger(__name__)


class EventSink(Protocol):
    """Receiver of outbound notifications."""

    async def emit(self, event: SinkEvent) -> None: ...

    async def aclose(self) -> None: ...


class LoggingEventSink:
    """Sink that only logs; used when no webhook is configured."""

    async def emit(self, event: SinkEvent) -> None:
        logger.info(
            "Notification event",
            extra={
                "event_type": event.event_type.value,
                "job_id": str(event.job_id),
                "actor": event.actor_display_name,
            },
        )

    async def aclose(self) -> None:
        return None


class WebhookEventSink:
    """Sink POSTing each event as JSON to a webhook."""

    def __init__(
        self,
        url: str,
        timeout_seconds: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.url = url
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)

    async def emit(self, event: SinkEvent) -> None:
        response = await self._client.post(self.url, json=event.to_dict())
        response.raise_for_status()

    async def aclose(self) -> None:
        await self._client.aclose()


def build_event_sink(settings: EventSinkSettings) -> EventSink:
    """Select the sink implementation from settings."""
    if settings.webhook_url:
        return WebhookEventSink(settings.webhook_url, settings.timeout_seconds)
    return LoggingEventSink()


class SinkDispatcher:
    """
    Schedules sink deliveries as background tasks.

    ``dispatch`` returns immediately; pending tasks are tracked so they are
    not garbage collected and can be drained on shutdown.
    """

    def __init__(self, sink: EventSink) -> None:
        self.sink = sink
        self._pending: set[asyncio.Task] = set()

    def dispatch(self, event: SinkEvent) -> None:
        task = asyncio.get_running_loop().create_task(self._deliver(event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """Wait for in-flight deliveries."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    async def aclose(self) -> None:
        await self.drain()
        await self.sink.aclose()

    async def _deliver(self, event: SinkEvent) -> None:
        try:
            await self.sink.emit(event)
        except Exception as e:
            logger.warning(
                "Notification sink failed, event dropped",
                extra={
                    "event_type": event.event_type.value,
                    "job_id": str(event.job_id),
                    "error_type": type(e).__name__,
                    "error_msg": str(e),
                },
            )
