"""
Problem report schemas.

Dependencies: pydantic
System role: Problem-report API contracts
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class FileProblemRequest(BaseModel):
    """Request schema for filing a problem."""

    description: str = ""


class ProblemReportResponse(BaseModel):
    """Response schema for a problem report."""

    id: UUID
    job_id: UUID
    reporter_id: UUID
    description: str
    status: str
    created_at: datetime
    resolved_at: datetime | None = None
