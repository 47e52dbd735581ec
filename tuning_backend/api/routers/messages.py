"""
Message thread API endpoints.

Routes: GET /jobs/{id}/messages, POST /jobs/{id}/messages

Dependencies: tuning_backend.application.services.message_service
System role: Message thread HTTP API
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from tuning_backend.api.deps import get_current_actor, get_message_service
from tuning_backend.api.errors import handle_domain_errors
from tuning_backend.api.routers.responses import map_messages_to_response
from tuning_backend.application.services.message_service import MessageService
from tuning_backend.core.actor import Actor
from tuning_backend.models.message import (
    MessageListResponse,
    MessageResponse,
    PostMessageRequest,
)

router = APIRouter(prefix="/jobs/{job_id}/messages", tags=["messages"])


@router.get("", response_model=MessageListResponse)
@handle_domain_errors
async def list_messages(
    job_id: UUID,
    actor: Actor | None = Depends(get_current_actor),
    message_service: MessageService = Depends(get_message_service),
) -> MessageListResponse:
    """
    Read a job's thread, oldest first.

    Raises:
        HTTPException(404): Job not found or not visible
    """
    messages = await message_service.list_messages(actor, job_id)
    return map_messages_to_response(messages)


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
@handle_domain_errors
async def post_message(
    job_id: UUID,
    request: PostMessageRequest,
    actor: Actor | None = Depends(get_current_actor),
    message_service: MessageService = Depends(get_message_service),
) -> MessageResponse:
    """
    Post to a job's thread.

    Raises:
        HTTPException(404): Job not found or not visible
        HTTPException(422): Blank body
    """
    message = await message_service.post_message(actor, job_id, request.body)
    return MessageResponse(**message)
