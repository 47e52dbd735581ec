"""
Test suite for MessageService.
"""

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from tuning_backend.application.services.message_service import MAX_BODY_LENGTH, MessageService
from tuning_backend.core.events.rooms import job_room
from tuning_backend.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from tuning_backend.models.events import SinkEventType


@pytest.fixture
def message_service(test_async_db: AsyncSession, hub, notifier) -> MessageService:
    return MessageService(db=test_async_db, hub=hub, notifier=notifier)


class TestPostMessage:
    @pytest.mark.asyncio
    async def test_post_should_return_render_ready_message(
        self, message_service, make_job, requester, requester_actor
    ) -> None:
        job = await make_job(requester)

        message = await message_service.post_message(requester_actor, job.id, "  When will it be done?  ")

        assert message["body"] == "When will it be done?"
        assert message["author_name"] == "Alice"
        assert message["author_role"] == "requester"
        assert message["job_id"] == job.id

    @pytest.mark.asyncio
    async def test_post_should_publish_to_job_room_and_sink(
        self,
        message_service,
        make_job,
        requester,
        operator_actor,
        hub,
        recording_client,
        notifier,
        recording_sink,
    ) -> None:
        # Arrange
        job = await make_job(requester)
        owner_client = recording_client(requester.id)
        hub.join(owner_client.connection, job_room(job.id))

        # Act
        message = await message_service.post_message(operator_actor, job.id, "Done tomorrow")
        await owner_client.settle()
        await notifier.drain()

        # Assert
        assert owner_client.events == ["newMessage"]
        data = owner_client.frames[0]["data"]
        assert data["message_id"] == str(message["id"])
        assert data["author_role"] == "operator"
        assert [event.event_type for event in recording_sink.events] == [SinkEventType.MESSAGE_POSTED]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", ["", "   ", None])
    async def test_post_should_reject_blank_body(
        self, message_service, make_job, requester, requester_actor, body
    ) -> None:
        job = await make_job(requester)

        with pytest.raises(ValidationError):
            await message_service.post_message(requester_actor, job.id, body)

    @pytest.mark.asyncio
    async def test_post_should_reject_oversized_body(
        self, message_service, make_job, requester, requester_actor
    ) -> None:
        job = await make_job(requester)

        with pytest.raises(ValidationError):
            await message_service.post_message(requester_actor, job.id, "x" * (MAX_BODY_LENGTH + 1))

    @pytest.mark.asyncio
    async def test_post_to_foreign_job_should_look_missing(
        self, message_service, make_job, requester, other_actor
    ) -> None:
        job = await make_job(requester)

        with pytest.raises(NotFoundError):
            await message_service.post_message(other_actor, job.id, "hi")

    @pytest.mark.asyncio
    async def test_post_unauthenticated_should_be_forbidden(self, message_service) -> None:
        with pytest.raises(ForbiddenError):
            await message_service.post_message(None, uuid.uuid4(), "hi")


class TestListMessages:
    @pytest.mark.asyncio
    async def test_list_should_be_symmetric_with_post(
        self, message_service, make_job, requester, requester_actor, operator_actor, other_actor
    ) -> None:
        # Arrange
        job = await make_job(requester)
        await message_service.post_message(requester_actor, job.id, "first")
        await message_service.post_message(operator_actor, job.id, "second")

        # Act
        as_owner = await message_service.list_messages(requester_actor, job.id)
        as_operator = await message_service.list_messages(operator_actor, job.id)

        # Assert
        assert [message["body"] for message in as_owner] == ["first", "second"]
        assert as_owner == as_operator
        assert [message["author_name"] for message in as_owner] == ["Alice", "Operator"]
        with pytest.raises(NotFoundError):
            await message_service.list_messages(other_actor, job.id)
