"""Results reporting entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class TestStatus(str, Enum):
    """Lifecycle status of a reported test."""

    __test__ = False

    CREATED = "Created"
    RUNNING = "Running"
    PASSED = "Passed"
    FAILED = "Failed"


@dataclass
class TestRecord:  # pylint: disable=too-many-instance-attributes
    """One test as recorded by the reporter."""

    __test__ = False

    test_id: str
    suite_id: str
    name: str
    description: str
    status: TestStatus = TestStatus.CREATED
    started_at: datetime | None = None
    ended_at: datetime | None = None
    details: str = ""
    artifacts: tuple[str, ...] = ()
    error_message: str | None = None
    stack_trace: str | None = None


@dataclass
class SuiteRecord:
    """One suite run as recorded by the reporter."""

    suite_id: str
    name: str
    test_ids: list[str] = field(default_factory=list)


@dataclass
class TestRunRecord:  # pylint: disable=too-many-instance-attributes
    """A test run and everything reported into it."""

    __test__ = False

    run_id: str
    name: str
    description: str
    started_at: datetime
    ended_at: datetime | None = None
    suites: dict[str, SuiteRecord] = field(default_factory=dict)
    tests: dict[str, TestRecord] = field(default_factory=dict)
