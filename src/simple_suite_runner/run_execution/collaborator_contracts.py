"""Capabilities a suite runner expects from its collaborators."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from simple_suite_runner.configuration.runtime_settings import TestPlan
from simple_suite_runner.run_state import RunState
from simple_suite_runner.suite_logging import SuiteLogger


class Reporter(Protocol):
    """Receives suite and test outcomes."""

    def create_test_suite(self, run_id: str, name: str) -> str: ...

    def create_test(self, run_id: str, suite_id: str, name: str, description: str) -> str: ...

    def start_test(self, run_id: str, test_id: str) -> None: ...

    def end_test(  # pylint: disable=too-many-arguments
        self,
        run_id: str,
        test_id: str,
        passed: bool,
        details: str,
        artifacts: Sequence[str],
        error_message: str | None,
        stack_trace: str | None,
    ) -> None: ...


class FormulaEvaluator(Protocol):
    """Evaluates formula expressions; see `FormulaEngine` for the base implementation."""

    def setup(self) -> None: ...

    async def refresh_model(self) -> None: ...

    async def evaluate(self, expression: str) -> Any: ...

    async def evaluate_with_retry(self, expression: str) -> Any: ...


class AutomationDriver(Protocol):
    """Browser session used to reach the application under test."""

    async def setup(self) -> None: ...

    async def setup_network_mocks(self) -> None: ...

    async def go_to_url(self, url: str) -> None: ...

    async def end_session(self) -> None: ...


class Authenticator(Protocol):  # pylint: disable=too-few-public-methods
    """Signs the suite persona in to the application."""

    async def login(self, url: str) -> None: ...


class UrlMapper(Protocol):  # pylint: disable=too-few-public-methods
    """Builds the URL of the application under test."""

    def generate_test_url(
        self, app_logical_name: str, persona: str, domain: str = "", query_params: str = ""
    ) -> str: ...


class FileSystem(Protocol):
    """File system operations used for result directories."""

    def create_directory(self, path: Path | str) -> None: ...

    def list_files(self, path: Path | str) -> Sequence[str] | None: ...

    def sanitize_name(self, name: str) -> str: ...


class LogSink(Protocol):  # pylint: disable=too-few-public-methods
    """Writes captured log lines into a result directory."""

    def write_logs(self, directory: Path | str, test_id: str | None = None) -> Any: ...


class LoggerFactory(Protocol):
    """Creates the scoped logger and log sink of a suite."""

    def create_logger(self, scope_id: str) -> SuiteLogger: ...

    def log_sink(self, scope_id: str) -> LogSink: ...


@dataclass(frozen=True)
class RunCollaborators:
    """Collaborators provided outside this package for one browser run."""

    automation_driver: AutomationDriver
    formula_engine: FormulaEvaluator
    authenticator: Authenticator


@dataclass(frozen=True)
class CollaboratorContext:
    """Inputs handed to a collaborator factory."""

    state: RunState
    test_plan: TestPlan
    file_system: FileSystem


CollaboratorFactory = Callable[[CollaboratorContext], RunCollaborators]
