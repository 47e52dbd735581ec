"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin, CreatedAtMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Connection management
  - UserModel, JobModel, MessageModel, ProblemReportModel: Domain entities
  - UserRole, JobStatus, ProblemStatus: Enum types for state tracking
  - user_crud, job_crud, message_crud, problem_report_crud: CRUD singletons

Dependencies: sqlalchemy, tuning_backend.configs
System role: Persistence gateway for users, jobs, messages and problem reports
"""

from tuning_backend.boundary.db.base import Base, CreatedAtMixin, TimestampMixin, UUIDMixin
from tuning_backend.boundary.db.connection import (
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from tuning_backend.boundary.db.models import (
    JobModel,
    JobStatus,
    MessageModel,
    ProblemReportModel,
    ProblemStatus,
    UserModel,
    UserRole,
)
from tuning_backend.boundary.db.CRUD import (
    BaseCRUD,
    JobCRUD,
    MessageCRUD,
    ProblemReportCRUD,
    UserCRUD,
    job_crud,
    message_crud,
    problem_report_crud,
    user_crud,
)

__all__ = [
    # Base classes
    "Base",
    "CreatedAtMixin",
    "TimestampMixin",
    "UUIDMixin",
    # Connection
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "JobModel",
    "JobStatus",
    "MessageModel",
    "ProblemReportModel",
    "ProblemStatus",
    "UserModel",
    "UserRole",
    # CRUD classes
    "BaseCRUD",
    "JobCRUD",
    "MessageCRUD",
    "ProblemReportCRUD",
    "UserCRUD",
    # CRUD singletons
    "job_crud",
    "message_crud",
    "problem_report_crud",
    "user_crud",
]
