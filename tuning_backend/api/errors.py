"""
Domain error handling for API endpoints.

Provides a decorator that maps domain exceptions onto HTTP responses with
a uniform error body, so routers stay free of try/except blocks.

Dependencies: fastapi, tuning_backend.core.exceptions
System role: Error-to-HTTP translation
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from tuning_backend.core.exceptions import (
    PersistenceError,
    ReportAlreadyOpenError,
    TuningServiceError,
)
from tuning_backend.models.common import ErrorResponse
from tuning_backend.observability.log_utils import error_context, log_exception_with_context

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])

STATUS_BY_CODE: dict[str, int] = {
    "forbidden": status.HTTP_403_FORBIDDEN,
    "not_found": status.HTTP_404_NOT_FOUND,
    "immutable_state": status.HTTP_409_CONFLICT,
    "invalid_transition": status.HTTP_409_CONFLICT,
    "report_already_open": status.HTTP_409_CONFLICT,
    "not_completed": status.HTTP_409_CONFLICT,
    "no_open_report": status.HTTP_409_CONFLICT,
    "not_ready": status.HTTP_409_CONFLICT,
    "validation_error": status.HTTP_422_UNPROCESSABLE_ENTITY,
}

INTERNAL_ERROR_MESSAGE = "An internal error occurred"


def error_detail(exc: TuningServiceError) -> dict[str, Any]:
    """
    Build the error body for a domain error.

    ``report_already_open`` embeds the existing open report so the client
    can route the user to it.
    """
    details: dict[str, Any] = dict(exc.details)
    if isinstance(exc, ReportAlreadyOpenError):
        # Local import: responses imports the schemas, which stay transport-agnostic
        from tuning_backend.api.routers.responses import map_report_to_response

        details["report"] = map_report_to_response(exc.report).model_dump(mode="json")
    return ErrorResponse(code=exc.code, error=exc.message, details=details).model_dump(
        mode="json"
    )


def handle_domain_errors(func: F) -> F:
    """
    Decorator to transform domain errors into HTTPExceptions.

    Expected conditions (forbidden, not found, state conflicts, validation)
    are logged at INFO and mapped by code. Persistence failures and anything
    unexpected become a 500 with a generic message; the cause is logged,
    never returned.
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except PersistenceError as e:
            log_exception_with_context(logger, "Persistence failure in request", e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=ErrorResponse(code=e.code, error=INTERNAL_ERROR_MESSAGE).model_dump(),
            )

        except TuningServiceError as e:
            status_code = STATUS_BY_CODE.get(e.code)
            if status_code is None:
                log_exception_with_context(logger, "Unmapped domain error", e)
                raise HTTPException(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    detail=ErrorResponse(code="internal", error=INTERNAL_ERROR_MESSAGE).model_dump(),
                )
            logger.info("Request rejected", extra=error_context(e))
            raise HTTPException(status_code=status_code, detail=error_detail(e))

        except Exception as e:
            log_exception_with_context(logger, "Unexpected failure in request", e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=ErrorResponse(code="internal", error=INTERNAL_ERROR_MESSAGE).model_dump(),
            )

    return wrapper  # type: ignore
