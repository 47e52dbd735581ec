"""
Test suite for problem-report rules.
"""

import uuid
from types import SimpleNamespace

import pytest

from tuning_backend.boundary.db.models.job_model import JobStatus
from tuning_backend.boundary.db.models.problem_report_model import ProblemStatus
from tuning_backend.core.exceptions import (
    NoOpenReportError,
    NotCompletedError,
    ReportAlreadyOpenError,
    ValidationError,
)
from tuning_backend.core.problem_rules import (
    MAX_DESCRIPTION_LENGTH,
    clean_description,
    ensure_can_file,
    ensure_can_resolve,
)


def open_report(job_id: uuid.UUID) -> SimpleNamespace:
    return SimpleNamespace(id=uuid.uuid4(), job_id=job_id, status=ProblemStatus.OPEN)


class TestEnsureCanFile:
    def test_should_accept_completed_job_without_open_report(self) -> None:
        ensure_can_file(uuid.uuid4(), JobStatus.COMPLETED, None)

    @pytest.mark.parametrize("status", [JobStatus.PENDING, JobStatus.CANCELLED])
    def test_should_reject_job_that_is_not_completed(self, status) -> None:
        with pytest.raises(NotCompletedError):
            ensure_can_file(uuid.uuid4(), status, None)

    def test_should_reject_second_open_report_and_carry_it(self) -> None:
        job_id = uuid.uuid4()
        existing = open_report(job_id)

        with pytest.raises(ReportAlreadyOpenError) as exc_info:
            ensure_can_file(job_id, JobStatus.COMPLETED, existing)

        assert exc_info.value.report is existing
        assert exc_info.value.details["report_id"] == str(existing.id)

    def test_not_completed_should_take_precedence(self) -> None:
        job_id = uuid.uuid4()

        with pytest.raises(NotCompletedError):
            ensure_can_file(job_id, JobStatus.PENDING, open_report(job_id))


class TestEnsureCanResolve:
    def test_should_accept_open_report(self) -> None:
        job_id = uuid.uuid4()
        ensure_can_resolve(job_id, open_report(job_id))

    def test_should_reject_missing_report(self) -> None:
        with pytest.raises(NoOpenReportError) as exc_info:
            ensure_can_resolve(uuid.uuid4(), None)

        assert exc_info.value.code == "no_open_report"


class TestCleanDescription:
    def test_should_strip_whitespace(self) -> None:
        assert clean_description("  broken idle  ") == "broken idle"

    def test_should_allow_empty_description(self) -> None:
        assert clean_description(None) == ""

    def test_should_reject_oversized_description(self) -> None:
        with pytest.raises(ValidationError):
            clean_description("x" * (MAX_DESCRIPTION_LENGTH + 1))
