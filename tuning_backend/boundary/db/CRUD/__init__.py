"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from tuning_backend.boundary.db.CRUD import job_crud, message_crud

    job = await job_crud.get_scoped(db, job_id, owner_id=actor.id)
"""

from tuning_backend.boundary.db.CRUD.base_crud import BaseCRUD
from tuning_backend.boundary.db.CRUD.user_crud import UserCRUD, user_crud
from tuning_backend.boundary.db.CRUD.job_crud import JobCRUD, job_crud
from tuning_backend.boundary.db.CRUD.message_crud import MessageCRUD, message_crud
from tuning_backend.boundary.db.CRUD.problem_report_crud import (
    ProblemReportCRUD,
    problem_report_crud,
)

__all__ = [
    "BaseCRUD",
    "UserCRUD",
    "user_crud",
    "JobCRUD",
    "job_crud",
    "MessageCRUD",
    "message_crud",
    "ProblemReportCRUD",
    "problem_report_crud",
]
