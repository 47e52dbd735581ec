"""API routers."""

from .health import router as health_router
from .jobs import router as jobs_router
from .messages import router as messages_router
from .problems import router as problems_router
from .realtime import router as realtime_router

__all__ = [
    "health_router",
    "jobs_router",
    "messages_router",
    "problems_router",
    "realtime_router",
]
