"""
Message thread schemas.

Dependencies: pydantic
System role: Message API contracts
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class PostMessageRequest(BaseModel):
    """Request schema for posting a message."""

    body: str = Field(description="Message text; blank bodies are rejected")


class MessageResponse(BaseModel):
    """Single message with its author denormalized for rendering."""

    id: UUID
    job_id: UUID
    author_id: UUID
    author_name: str
    author_role: str
    body: str
    created_at: datetime


class MessageListResponse(BaseModel):
    """Response schema for a job's thread."""

    messages: list[MessageResponse]
    total: int = Field(description="Total number of messages")
