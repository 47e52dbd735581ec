"""
Problem report ORM model.

Requester escalations against a completed job.

Dependencies: sqlalchemy, tuning_backend.boundary.db.base
System role: Problem-report persistence
"""

import enum
from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from tuning_backend.boundary.db.base import Base, CreatedAtMixin, UUIDMixin


class ProblemStatus(str, enum.Enum):
    """
    Problem report states.

    OPEN: Awaiting the operator
    RESOLVED: Closed by the operator (terminal for this report)
    """

    OPEN = "open"
    RESOLVED = "resolved"


class ProblemReportModel(Base, UUIDMixin, CreatedAtMixin):
    """
    Problem report ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        job_id: Completed job the report is filed against
        reporter_id: Job owner who filed it
        description: Free-text problem description
        status: OPEN or RESOLVED
        created_at: Filing timestamp (UTC)
        resolved_at: Resolution timestamp (UTC), null while open

    Constraints:
        uq_problem_reports_one_open: partial unique index on job_id for
        status='OPEN' (stored enum name); at most one open report per job
    """

    __tablename__ = "problem_reports"
    __table_args__ = (
        Index(
            "uq_problem_reports_one_open",
            "job_id",
            unique=True,
            postgresql_where=text("status = 'OPEN'"),
            sqlite_where=text("status = 'OPEN'"),
        ),
    )

    job_id: Mapped[UUID] = mapped_column(ForeignKey("jobs.id"), nullable=False, index=True)
    reporter_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    status: Mapped[ProblemStatus] = mapped_column(
        Enum(ProblemStatus, native_enum=False),
        nullable=False,
        default=ProblemStatus.OPEN,
    )

    resolved_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )
