"""
Test suite for the outbound event sink and its dispatcher.
"""

import json
import logging
import uuid

import httpx
import pytest

from tuning_backend.configs.event_sink import EventSinkSettings
from tuning_backend.core.events.sink import (
    LoggingEventSink,
    SinkDispatcher,
    WebhookEventSink,
    build_event_sink,
)
from tuning_backend.models.events import SinkEvent, SinkEventType


@pytest.fixture
def sink_event() -> SinkEvent:
    return SinkEvent(
        event_type=SinkEventType.PROBLEM_FILED,
        job_id=uuid.uuid4(),
        actor_display_name="Alice",
        payload={"report_id": "r-1"},
    )


class FailingSink:
    async def emit(self, event: SinkEvent) -> None:
        raise RuntimeError("push bridge unavailable")

    async def aclose(self) -> None:
        return None


class TestSinkDispatcher:
    async def test_dispatch_should_deliver_in_background(self, notifier, recording_sink, sink_event) -> None:
        notifier.dispatch(sink_event)
        await notifier.drain()

        assert recording_sink.events == [sink_event]

    async def test_failures_should_be_logged_and_swallowed(self, sink_event, caplog) -> None:
        dispatcher = SinkDispatcher(FailingSink())

        with caplog.at_level(logging.WARNING):
            dispatcher.dispatch(sink_event)
            await dispatcher.drain()

        assert "Notification sink failed" in caplog.text

    async def test_aclose_should_drain_and_close_sink(self, notifier, recording_sink, sink_event) -> None:
        notifier.dispatch(sink_event)

        await notifier.aclose()

        assert recording_sink.events == [sink_event]
        assert recording_sink.closed


class TestSinks:
    def test_sink_event_should_serialize_with_wire_keys(self, sink_event) -> None:
        assert sink_event.to_dict() == {
            "eventType": "problem_filed",
            "jobId": str(sink_event.job_id),
            "actorDisplayName": "Alice",
            "payload": {"report_id": "r-1"},
        }

    async def test_webhook_sink_should_post_event_json(self, sink_event) -> None:
        received = []

        def handler(request: httpx.Request) -> httpx.Response:
            received.append(json.loads(request.content))
            return httpx.Response(204)

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        sink = WebhookEventSink("https://push.example.com/hook", client=client)

        await sink.emit(sink_event)
        await sink.aclose()

        assert received == [sink_event.to_dict()]

    async def test_webhook_sink_should_raise_on_error_status(self, sink_event) -> None:
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(503)))
        sink = WebhookEventSink("https://push.example.com/hook", client=client)

        with pytest.raises(httpx.HTTPStatusError):
            await sink.emit(sink_event)
        await sink.aclose()

    def test_build_event_sink_should_select_by_settings(self) -> None:
        assert isinstance(build_event_sink(EventSinkSettings(webhook_url="")), LoggingEventSink)
        assert isinstance(
            build_event_sink(EventSinkSettings(webhook_url="https://push.example.com/hook")),
            WebhookEventSink,
        )
