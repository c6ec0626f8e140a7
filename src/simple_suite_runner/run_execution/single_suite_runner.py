"""Runs one suite definition against one browser configuration."""

from __future__ import annotations

import json
import logging
import traceback
from contextlib import ExitStack
from pathlib import Path

from simple_suite_runner.configuration.runtime_settings import (
    BrowserConfiguration,
    SuiteDefinition,
    TestCaseDefinition,
)
from simple_suite_runner.run_state import RunState
from simple_suite_runner.suite_logging import SuiteLogger

from .collaborator_contracts import (
    Authenticator,
    AutomationDriver,
    FileSystem,
    FormulaEvaluator,
    LoggerFactory,
    LogSink,
    Reporter,
    UrlMapper,
)
from .run_contracts import OutcomeCounters, StepOutcome

_FALLBACK_LOGGER = SuiteLogger(logging.getLogger(__name__))


class SuiteRunnerReuseError(RuntimeError):
    """Raised when a suite runner is asked to run a second time."""


class SingleSuiteRunner:  # pylint: disable=too-many-instance-attributes
    """Drives one run of a suite: setup, every test case, then teardown.

    Faults raised before the first test case abort the run, a fault inside a
    test case fails only that case, and hook faults are only logged. Teardown
    always runs. A runner instance executes a single run.
    """

    def __init__(  # pylint: disable=too-many-arguments
        self,
        reporter: Reporter,
        formula_engine: FormulaEvaluator,
        automation_driver: AutomationDriver,
        authenticator: Authenticator,
        state: RunState | None,
        url_mapper: UrlMapper,
        file_system: FileSystem,
        logger_factory: LoggerFactory,
    ) -> None:
        self._reporter = reporter
        self._formula_engine = formula_engine
        self._automation_driver = automation_driver
        self._authenticator = authenticator
        self.state = state if state is not None else RunState()
        self._url_mapper = url_mapper
        self._file_system = file_system
        self._logger_factory = logger_factory

        self.counters = OutcomeCounters()
        self._has_run = False
        self._logger: SuiteLogger = _FALLBACK_LOGGER
        self._log_sink: LogSink | None = None
        self._run_result_directory: Path | None = None

    async def run_test(  # pylint: disable=too-many-arguments
        self,
        run_id: str,
        run_directory: Path | str,
        suite_definition: SuiteDefinition,
        browser_config: BrowserConfiguration,
        domain: str = "",
        query_params: str = "",
    ) -> None:
        """Run every test case of `suite_definition` and report the outcomes.

        Raises:
          SuiteRunnerReuseError: If this runner has already been invoked.
        """
        # Checked and set before the first await.
        if self._has_run:
            raise SuiteRunnerReuseError("A suite runner can only run a suite once.")
        self._has_run = True

        with ExitStack() as scopes:
            try:
                suite_id, run_result_directory = await self._set_up_run(
                    scopes, run_id, Path(run_directory), suite_definition, browser_config
                )
                await self._open_application(suite_definition, domain, query_params)
                await self._run_test_cases(
                    run_id, suite_id, run_result_directory, suite_definition, browser_config
                )
                await self._run_suite_complete_hook(suite_definition)
            except Exception as exc:  # pylint: disable=broad-exception-caught
                self._logger.error(
                    "Encountered an error while running the test suite: %s", _describe(exc)
                )
            finally:
                await self._tear_down()

    async def _set_up_run(  # pylint: disable=too-many-arguments
        self,
        scopes: ExitStack,
        run_id: str,
        run_directory: Path,
        suite_definition: SuiteDefinition,
        browser_config: BrowserConfiguration,
    ) -> tuple[str, Path]:
        suite_id = self._reporter.create_test_suite(run_id, suite_definition.name)
        self._logger = self._logger_factory.create_logger(suite_id)
        self._log_sink = self._logger_factory.log_sink(suite_id)
        scopes.enter_context(self._logger.begin_scope(suite_id))
        self.state.logger = self._logger
        self.state.suite_id = suite_id

        self.state.suite_definition = suite_definition
        self.state.run_id = run_id
        self.state.browser_config = browser_config
        suite_directory_name = (
            f"{self._file_system.sanitize_name(suite_definition.name)}"
            f"_{browser_config.browser}_{suite_id[:6]}"
        )
        self._run_result_directory = run_directory / suite_directory_name
        self.state.result_directory = self._run_result_directory
        self._file_system.create_directory(self._run_result_directory)

        self._logger.info("Setting up the formula engine.")
        self._formula_engine.setup()
        await self._formula_engine.refresh_model()

        self._logger.info("Setting up the %s browser session.", browser_config.browser)
        await self._automation_driver.setup()
        await self._automation_driver.setup_network_mocks()
        return suite_id, self._run_result_directory

    async def _open_application(
        self, suite_definition: SuiteDefinition, domain: str, query_params: str
    ) -> None:
        url = self._url_mapper.generate_test_url(
            suite_definition.app_logical_name,
            suite_definition.persona,
            domain,
            query_params,
        )
        self._logger.info("Signing in as persona %s.", suite_definition.persona)
        await self._authenticator.login(url)
        self._logger.info("Navigating to %s.", url)
        await self._automation_driver.go_to_url(url)

    async def _run_test_cases(  # pylint: disable=too-many-arguments
        self,
        run_id: str,
        suite_id: str,
        run_result_directory: Path,
        suite_definition: SuiteDefinition,
        browser_config: BrowserConfiguration,
    ) -> None:
        for test_case in suite_definition.test_cases:
            self.counters.total += 1
            try:
                outcome = await self._run_test_case(
                    run_id,
                    suite_id,
                    run_result_directory,
                    suite_definition,
                    test_case,
                    browser_config,
                )
            except Exception as exc:  # pylint: disable=broad-exception-caught
                self._logger.error(
                    "Test case %s could not be completed: %s", test_case.name, _describe(exc)
                )
                outcome = StepOutcome.failed(exc)

            if outcome.succeeded:
                self.counters.passed += 1
            else:
                self.counters.failed += 1

    async def _run_test_case(  # pylint: disable=too-many-arguments
        self,
        run_id: str,
        suite_id: str,
        run_result_directory: Path,
        suite_definition: SuiteDefinition,
        test_case: TestCaseDefinition,
        browser_config: BrowserConfiguration,
    ) -> StepOutcome:
        test_id = self._reporter.create_test(
            run_id, suite_id, test_case.name, test_case.description
        )

        with self._logger.begin_scope(test_id):
            test_directory: Path | None = None
            try:
                self._reporter.start_test(run_id, test_id)
                self.state.test_id = test_id
                test_directory = (
                    run_result_directory
                    / f"{self._file_system.sanitize_name(test_case.name)}_{test_id[:6]}"
                )
                self.state.result_directory = test_directory
                self._file_system.create_directory(test_directory)

                await self._evaluate_hook("OnTestCaseStart", suite_definition.on_test_case_start)
                outcome = await self._evaluate_steps(test_case)
                if outcome.succeeded:
                    await self._evaluate_hook(
                        "OnTestCaseComplete", suite_definition.on_test_case_complete
                    )
                    self._logger.info("Test case %s passed.", test_case.name)
                else:
                    self._logger.info("Test case %s failed.", test_case.name)
            except Exception as exc:  # pylint: disable=broad-exception-caught
                self._logger.error(
                    "Test case %s could not be completed: %s", test_case.name, _describe(exc)
                )
                outcome = StepOutcome.failed(exc)

            artifacts: list[str] = []
            if test_directory is not None:
                try:
                    if self._log_sink is not None:
                        self._log_sink.write_logs(test_directory, test_id)
                    artifacts = list(self._file_system.list_files(test_directory) or [])
                except Exception as exc:  # pylint: disable=broad-exception-caught
                    self._logger.error(
                        "Failed to collect the artifacts of test case %s: %s",
                        test_case.name,
                        _describe(exc),
                    )
                    if outcome.succeeded:
                        outcome = StepOutcome.failed(exc)

            error = outcome.error
            self._reporter.end_test(
                run_id,
                test_id,
                outcome.succeeded,
                _describe_test(test_case, browser_config),
                artifacts,
                str(error) if error is not None else None,
                _stack_trace(error) if error is not None else None,
            )
        return outcome

    async def _evaluate_steps(self, test_case: TestCaseDefinition) -> StepOutcome:
        self._logger.info("Running test case %s.", test_case.name)
        try:
            await self._formula_engine.evaluate_with_retry(test_case.steps)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            self._logger.error("Test case %s failed: %s", test_case.name, _describe(exc))
            return StepOutcome.failed(exc)
        return StepOutcome.passed()

    async def _evaluate_hook(self, hook_name: str, expression: str | None) -> None:
        """Evaluate a hook once; faults are logged and never affect the case result."""
        if not expression:
            return
        self._logger.info("Running %s.", hook_name)
        try:
            await self._formula_engine.evaluate(expression)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            self._logger.error("%s failed: %s", hook_name, _describe(exc))

    async def _run_suite_complete_hook(self, suite_definition: SuiteDefinition) -> None:
        if not suite_definition.on_test_suite_complete:
            return
        self.state.result_directory = self._run_result_directory
        await self._evaluate_hook("OnTestSuiteComplete", suite_definition.on_test_suite_complete)

    async def _tear_down(self) -> None:
        try:
            await self._automation_driver.end_session()
        except Exception as exc:  # pylint: disable=broad-exception-caught
            self._logger.error("Failed to end the browser session: %s", _describe(exc))

        if self._log_sink is not None and self._run_result_directory is not None:
            try:
                self._log_sink.write_logs(self._run_result_directory, None)
            except Exception as exc:  # pylint: disable=broad-exception-caught
                self._logger.error("Failed to write the suite logs: %s", _describe(exc))

        self._logger.info("Total cases: %s", self.counters.total)
        self._logger.info("Cases passed: %s", self.counters.passed)
        self._logger.info("Cases skipped: %s", self.counters.skipped)
        self._logger.info("Cases failed: %s\n", self.counters.failed)


def _describe(exc: BaseException) -> str:
    return "".join(traceback.format_exception(exc)).rstrip()


def _stack_trace(exc: BaseException) -> str:
    return "".join(traceback.format_tb(exc.__traceback__))


def _describe_test(test_case: TestCaseDefinition, browser_config: BrowserConfiguration) -> str:
    return json.dumps(
        {
            "testName": test_case.name,
            "browserConfiguration": {
                "browser": browser_config.browser,
                "device": browser_config.device,
                "screenWidth": browser_config.screen_width,
                "screenHeight": browser_config.screen_height,
            },
        },
        ensure_ascii=False,
    )
