"""In-memory reporter collecting suite and test outcomes for a run."""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from datetime import UTC, datetime

from .report_models import SuiteRecord, TestRecord, TestRunRecord, TestStatus


class ReportingError(Exception):
    """Raised when a reporter call references an unknown run, suite or test."""


class InMemoryTestReporter:
    """Reporter keeping every run in memory until it is written out."""

    def __init__(self) -> None:
        self._runs: dict[str, TestRunRecord] = {}

    def create_test_run(self, name: str, description: str = "") -> str:
        run_id = str(uuid.uuid4())
        self._runs[run_id] = TestRunRecord(
            run_id=run_id,
            name=name,
            description=description,
            started_at=datetime.now(UTC),
        )
        return run_id

    def end_test_run(self, run_id: str) -> None:
        self.get_test_run(run_id).ended_at = datetime.now(UTC)

    def get_test_run(self, run_id: str) -> TestRunRecord:
        try:
            return self._runs[run_id]
        except KeyError as exc:
            raise ReportingError(f"Unknown test run: {run_id}") from exc

    def create_test_suite(self, run_id: str, name: str) -> str:
        test_run = self.get_test_run(run_id)
        suite_id = str(uuid.uuid4())
        test_run.suites[suite_id] = SuiteRecord(suite_id=suite_id, name=name)
        return suite_id

    def create_test(self, run_id: str, suite_id: str, name: str, description: str) -> str:
        test_run = self.get_test_run(run_id)
        suite = test_run.suites.get(suite_id)
        if suite is None:
            raise ReportingError(f"Unknown test suite: {suite_id}")
        test_id = str(uuid.uuid4())
        test_run.tests[test_id] = TestRecord(
            test_id=test_id,
            suite_id=suite_id,
            name=name,
            description=description,
        )
        suite.test_ids.append(test_id)
        return test_id

    def start_test(self, run_id: str, test_id: str) -> None:
        test = self._get_test(run_id, test_id)
        test.status = TestStatus.RUNNING
        test.started_at = datetime.now(UTC)

    def end_test(  # pylint: disable=too-many-arguments
        self,
        run_id: str,
        test_id: str,
        passed: bool,
        details: str,
        artifacts: Sequence[str],
        error_message: str | None,
        stack_trace: str | None,
    ) -> None:
        test = self._get_test(run_id, test_id)
        test.status = TestStatus.PASSED if passed else TestStatus.FAILED
        test.ended_at = datetime.now(UTC)
        test.details = details
        test.artifacts = tuple(artifacts)
        test.error_message = error_message
        test.stack_trace = stack_trace

    def _get_test(self, run_id: str, test_id: str) -> TestRecord:
        test = self.get_test_run(run_id).tests.get(test_id)
        if test is None:
            raise ReportingError(f"Unknown test: {test_id}")
        return test
