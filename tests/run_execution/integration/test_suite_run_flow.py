"""End-to-end suite run flow with in-process collaborators."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from openpyxl import load_workbook
from simple_suite_runner.formula_evaluation import FormulaEngine
from simple_suite_runner.results_writing import (
    RESULTS_SHEET_NAME,
    RUN_INFO_SHEET_NAME,
    InMemoryTestReporter,
)
from simple_suite_runner.run_execution import (
    CollaboratorContext,
    OutcomeCounters,
    RunCollaborators,
    RunExecutionError,
    RunRequest,
    execute_suite_run,
)

PLAN = """
testSuite:
  testSuiteName: Expense suite
  persona: User1
  appLogicalName: expense_app
  onTestCaseStart: Trace("start")
  testCases:
    - testCaseName: Submit expense
      testSteps: Assert(true)
    - testCaseName: Reject expense
      testSteps: Fail()
testSettings:
  browserConfigurations:
    - browser: Chromium
    - browser: Firefox
  timeout: 1000
environmentVariables:
  users:
    - personaName: User1
      emailKey: USER1_EMAIL
      passwordKey: USER1_PASSWORD
"""


class InProcessFormulaEngine(FormulaEngine):
    retry_interval_seconds = 0.0

    def setup(self) -> None:
        self.logger.info("Engine ready for %s.", self.state.browser_config.browser)

    async def refresh_model(self) -> None:
        return None

    async def evaluate(self, expression: str) -> Any:
        if expression == "Fail()":
            raise AssertionError("Assertion failed")
        if self.state.result_directory is not None:
            (self.state.result_directory / "trace.txt").write_text(expression, encoding="utf-8")
        return True


class RecordingDriver:
    def __init__(self, visited: list[str]) -> None:
        self._visited = visited

    async def setup(self) -> None:
        return None

    async def setup_network_mocks(self) -> None:
        return None

    async def go_to_url(self, url: str) -> None:
        self._visited.append(url)

    async def end_session(self) -> None:
        return None


class CapturingReporter(InMemoryTestReporter):
    run_id = ""

    def create_test_run(self, name: str, description: str = "") -> str:
        self.run_id = super().create_test_run(name, description)
        return self.run_id


class NoopAuthenticator:
    async def login(self, url: str) -> None:
        return None


def _write_plan(tmp_path: Path, contents: str = PLAN) -> Path:
    path = tmp_path / "testPlan.yaml"
    path.write_text(contents, encoding="utf-8")
    return path


def _factory(contexts: list[CollaboratorContext], visited: list[str]):
    def _build(context: CollaboratorContext) -> RunCollaborators:
        contexts.append(context)
        return RunCollaborators(
            automation_driver=RecordingDriver(visited),
            formula_engine=InProcessFormulaEngine(context.state),
            authenticator=NoopAuthenticator(),
        )

    return _build


def test_suite_runs_once_per_browser_and_writes_results(tmp_path: Path) -> None:
    plan_path = _write_plan(tmp_path)
    contexts: list[CollaboratorContext] = []
    visited: list[str] = []

    outcome = execute_suite_run(
        RunRequest(config_path=str(plan_path), domain="apps.example.com", query_params="a=1"),
        collaborator_factory=_factory(contexts, visited),
    )

    assert outcome.counters == OutcomeCounters(total=4, passed=2, skipped=0, failed=2)
    assert outcome.run_directory.parent == (tmp_path / "TestOutput").resolve()
    assert outcome.output_path == outcome.run_directory / "results.xlsx"
    assert visited == ["https://apps.example.com/play/expense_app?a=1"] * 2
    assert contexts[0].state is not contexts[1].state
    assert [context.state.browser_config.browser for context in contexts] == [
        "Chromium",
        "Firefox",
    ]

    workbook = load_workbook(outcome.output_path)
    rows = list(workbook[RESULTS_SHEET_NAME].iter_rows(min_row=2, values_only=True))
    assert [(row[1], row[3]) for row in rows] == [
        ("Submit expense", "Passed"),
        ("Reject expense", "Failed"),
        ("Submit expense", "Passed"),
        ("Reject expense", "Failed"),
    ]
    info = {row[0]: row[1] for row in workbook[RUN_INFO_SHEET_NAME].iter_rows(values_only=True)}
    assert info["suites"] == 2
    assert info["total"] == 4


def test_case_directories_hold_logs_and_artifacts(tmp_path: Path) -> None:
    plan_path = _write_plan(tmp_path)
    reporter = CapturingReporter()
    output_dir = tmp_path / "out"

    outcome = execute_suite_run(
        RunRequest(
            config_path=str(plan_path), output_dir=str(output_dir), domain="apps.example.com"
        ),
        collaborator_factory=_factory([], []),
        reporter=reporter,
    )

    assert outcome.run_directory.parent == output_dir.resolve()
    suite_directories = sorted(path for path in outcome.run_directory.iterdir() if path.is_dir())
    assert len(suite_directories) == 2
    assert all((directory / "logs.txt").exists() for directory in suite_directories)

    test_run = reporter.get_test_run(reporter.run_id)
    passed = [test for test in test_run.tests.values() if test.error_message is None]
    failed = [test for test in test_run.tests.values() if test.error_message is not None]
    assert {test.error_message for test in failed} == {"Assertion failed"}
    for test in passed:
        artifact_names = sorted(Path(artifact).name for artifact in test.artifacts)
        assert artifact_names == ["logs.txt", "trace.txt"]
        assert "Engine ready" not in Path(test.artifacts[0]).read_text(encoding="utf-8")


def test_missing_plan_is_reported(tmp_path: Path) -> None:
    with pytest.raises(RunExecutionError, match="Test plan file not found"):
        execute_suite_run(
            RunRequest(config_path=str(tmp_path / "missing.yaml")),
            collaborator_factory=_factory([], []),
        )


def test_plan_without_collaborators_requires_a_factory(tmp_path: Path) -> None:
    plan_path = _write_plan(tmp_path)

    with pytest.raises(RunExecutionError, match="extensions.collaborators"):
        execute_suite_run(RunRequest(config_path=str(plan_path)))


def test_failing_collaborator_factory_is_reported(tmp_path: Path) -> None:
    plan_path = _write_plan(tmp_path)

    def _broken(context: CollaboratorContext) -> RunCollaborators:
        raise RuntimeError("driver unavailable")

    with pytest.raises(RunExecutionError, match="driver unavailable"):
        execute_suite_run(RunRequest(config_path=str(plan_path)), collaborator_factory=_broken)


def test_finished_browser_results_survive_a_later_factory_failure(tmp_path: Path) -> None:
    plan_path = _write_plan(tmp_path)
    build = _factory([], [])
    calls: list[CollaboratorContext] = []

    def _fails_for_second_browser(context: CollaboratorContext) -> RunCollaborators:
        calls.append(context)
        if len(calls) == 2:
            raise RuntimeError("Firefox driver unavailable")
        return build(context)

    with pytest.raises(RunExecutionError, match="Firefox driver unavailable"):
        execute_suite_run(
            RunRequest(
                config_path=str(plan_path),
                output_dir=str(tmp_path / "out"),
                domain="apps.example.com",
            ),
            collaborator_factory=_fails_for_second_browser,
        )

    assert len(calls) == 2
    [results_path] = (tmp_path / "out").glob("*/results.xlsx")
    workbook = load_workbook(results_path)
    rows = list(workbook[RESULTS_SHEET_NAME].iter_rows(min_row=2, values_only=True))
    assert [(row[1], row[3]) for row in rows] == [
        ("Submit expense", "Passed"),
        ("Reject expense", "Failed"),
    ]
