"""Tests for structured logging helpers."""

import enum
import logging
import uuid
from datetime import datetime, timezone

import pytest

from tuning_backend.core.exceptions import NotFoundError, ValidationError
from tuning_backend.observability.correlation import (
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from tuning_backend.observability.log_utils import (
    error_context,
    log_exception_with_context,
    log_with_context,
    safe_log_value,
)
from tuning_backend.observability.logger import CorrelationIdFilter
from tuning_backend.observability.middleware import _level_for


class Color(enum.Enum):
    RED = "red"


class TestSafeLogValue:
    """Tests for safe_log_value conversion."""

    def test_scalars(self) -> None:
        job_id = uuid.uuid4()
        assert safe_log_value(None) == "None"
        assert safe_log_value(Color.RED) == "red"
        assert safe_log_value(job_id) == str(job_id)
        assert safe_log_value(3) == "3"

    def test_datetime_is_iso(self) -> None:
        moment = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        assert safe_log_value(moment) == "2024-05-01T12:00:00+00:00"

    def test_collections_are_summarized(self) -> None:
        assert safe_log_value([1, 2, 3]) == "list(3 items)"
        assert safe_log_value({"a": 1}) == "dict(1 keys)"

    def test_long_text_is_truncated(self) -> None:
        result = safe_log_value("x" * 300, max_length=10)
        assert result.startswith("x" * 10 + "...")
        assert "300 total" in result


class TestErrorContext:
    """Tests for error_context flattening."""

    def test_domain_error_contributes_code_and_details(self) -> None:
        job_id = uuid.uuid4()
        context = error_context(NotFoundError("job", job_id))

        assert context["error_type"] == "NotFoundError"
        assert context["error_code"] == "not_found"
        assert context["job_id"] == str(job_id)

    def test_plain_error(self) -> None:
        context = error_context(RuntimeError("boom"))

        assert context == {"error_type": "RuntimeError", "error_msg": "boom"}


def test_log_with_context_converts_values(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("tests.log_utils")
    job_id = uuid.uuid4()

    with caplog.at_level(logging.INFO, logger="tests.log_utils"):
        log_with_context(logger, logging.INFO, "Job touched", job_id=job_id, tags=["a", "b"])

    record = caplog.records[-1]
    assert record.job_id == str(job_id)
    assert record.tags == "list(2 items)"


def test_log_exception_with_context(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("tests.log_utils")
    error = ValidationError("Body is required", field="body")

    with caplog.at_level(logging.ERROR, logger="tests.log_utils"):
        log_exception_with_context(logger, "Rejected", error, operation="post_message")

    record = caplog.records[-1]
    assert record.error_code == "validation_error"
    assert record.field == "body"
    assert record.operation == "post_message"
    assert record.exc_info is not None


class TestCorrelation:
    """Tests for correlation ID context."""

    def test_set_and_clear(self) -> None:
        value = set_correlation_id("abc")
        assert value == "abc"
        assert get_correlation_id() == "abc"

        clear_correlation_id()
        assert get_correlation_id() == ""

    def test_generated_when_missing(self) -> None:
        value = set_correlation_id()
        try:
            assert uuid.UUID(value)
        finally:
            clear_correlation_id()

    def test_filter_attaches_id(self) -> None:
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)

        CorrelationIdFilter().filter(record)
        assert record.correlation_id == "-"

        set_correlation_id("req-1")
        try:
            CorrelationIdFilter().filter(record)
            assert record.correlation_id == "req-1"
        finally:
            clear_correlation_id()


@pytest.mark.parametrize(
    ("path", "status_code", "level"),
    [
        ("/api/v1/jobs", 200, logging.INFO),
        ("/api/v1/jobs", 404, logging.WARNING),
        ("/api/v1/jobs", 500, logging.ERROR),
        ("/api/v1/health", 200, logging.DEBUG),
        ("/api/v1/health/db", 503, logging.ERROR),
    ],
)
def test_access_log_level(path: str, status_code: int, level: int) -> None:
    assert _level_for(path, status_code) == level
