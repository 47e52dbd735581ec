"""API dependency providers."""

from tuning_backend.api.deps.dependencies import (
    get_current_actor,
    get_event_hub,
    get_job_service,
    get_message_service,
    get_problem_report_service,
    get_realtime_service,
    get_session_factory,
    get_sink_dispatcher,
    get_user_service,
)

__all__ = [
    "get_current_actor",
    "get_event_hub",
    "get_job_service",
    "get_message_service",
    "get_problem_report_service",
    "get_realtime_service",
    "get_session_factory",
    "get_sink_dispatcher",
    "get_user_service",
]
