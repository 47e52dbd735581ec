"""
Database models package.

Exports:
  - UserModel, UserRole: Actor identity and role enum
  - JobModel, JobStatus: Tuning job and lifecycle enum
  - MessageModel: Job message thread entry
  - ProblemReportModel, ProblemStatus: Escalation and its status enum

Dependencies: sqlalchemy, tuning_backend.boundary.db.base
System role: Database model definitions for domain entities
"""

from tuning_backend.boundary.db.models.user_model import UserModel, UserRole
from tuning_backend.boundary.db.models.job_model import JobModel, JobStatus
from tuning_backend.boundary.db.models.message_model import MessageModel
from tuning_backend.boundary.db.models.problem_report_model import (
    ProblemReportModel,
    ProblemStatus,
)

__all__ = [
    "UserModel",
    "UserRole",
    "JobModel",
    "JobStatus",
    "MessageModel",
    "ProblemReportModel",
    "ProblemStatus",
]
