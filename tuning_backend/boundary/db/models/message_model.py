"""
Message ORM model.

Append-only discussion entries attached to a job.

Dependencies: sqlalchemy, tuning_backend.boundary.db.base
System role: Job message thread persistence
"""

from uuid import UUID

from sqlalchemy import ForeignKey, Index, Text
from sqlalchemy.orm import Mapped, mapped_column

from tuning_backend.boundary.db.base import Base, CreatedAtMixin, UUIDMixin


class MessageModel(Base, UUIDMixin, CreatedAtMixin):
    """
    Message ORM model. Rows are never updated or deleted.

    Attributes:
        id: UUID primary key (auto-generated)
        job_id: Job the message belongs to
        author_id: Posting user (job owner or operator)
        body: Trimmed, non-empty text
        created_at: Posting timestamp (UTC); defines thread order
    """

    __tablename__ = "messages"
    __table_args__ = (Index("ix_messages_job_created", "job_id", "created_at"),)

    job_id: Mapped[UUID] = mapped_column(ForeignKey("jobs.id"), nullable=False)
    author_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
