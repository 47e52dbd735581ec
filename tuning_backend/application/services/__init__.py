"""Application services."""

from tuning_backend.application.services.job_service import JobService
from tuning_backend.application.services.message_service import MessageService
from tuning_backend.application.services.problem_report_service import ProblemReportService
from tuning_backend.application.services.realtime_service import RealtimeService
from tuning_backend.application.services.user_service import UserService

__all__ = [
    "JobService",
    "MessageService",
    "ProblemReportService",
    "RealtimeService",
    "UserService",
]
