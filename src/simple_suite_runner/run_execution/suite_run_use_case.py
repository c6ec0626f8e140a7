"""Run execution use-case service."""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from pathlib import Path

from simple_suite_runner.configuration import ConfigurationError, TestPlan, load_test_plan
from simple_suite_runner.file_system import LocalFileSystem
from simple_suite_runner.results_writing import InMemoryTestReporter, write_results_workbook
from simple_suite_runner.run_state import RunState
from simple_suite_runner.suite_logging import SuiteLoggerFactory
from simple_suite_runner.url_mapping import DEFAULT_APP_URL_TEMPLATE, TemplateUrlMapper

from .collaborator_contracts import (
    CollaboratorContext,
    CollaboratorFactory,
    FileSystem,
    RunCollaborators,
)
from .collaborator_loading import CollaboratorLoadingError, load_collaborator_factory
from .run_contracts import OutcomeCounters, RunOutcome, RunRequest
from .single_suite_runner import SingleSuiteRunner

DEFAULT_OUTPUT_DIRNAME = "TestOutput"
RESULTS_FILE_NAME = "results.xlsx"

_LOGGER = logging.getLogger(__name__)


class RunExecutionError(Exception):
    """Raised when a run use case cannot be completed."""


def execute_suite_run(
    request: RunRequest,
    *,
    collaborator_factory: CollaboratorFactory | None = None,
    reporter: InMemoryTestReporter | None = None,
    file_system: FileSystem | None = None,
) -> RunOutcome:
    """Run the test plan once per configured browser and write the results workbook."""
    test_plan = _load_plan(request.config_path)
    resolved_factory = collaborator_factory or _resolve_collaborator_factory(test_plan)
    return asyncio.run(
        _execute_browser_runs(
            request=request,
            test_plan=test_plan,
            collaborator_factory=resolved_factory,
            reporter=reporter or InMemoryTestReporter(),
            file_system=file_system or LocalFileSystem(),
        )
    )


def _load_plan(config_path: str) -> TestPlan:
    try:
        return load_test_plan(config_path)
    except (ConfigurationError, OSError) as exc:
        raise RunExecutionError(str(exc)) from exc


def _resolve_collaborator_factory(test_plan: TestPlan) -> CollaboratorFactory:
    import_path = test_plan.extensions.collaborators
    if not import_path:
        raise RunExecutionError(
            "extensions.collaborators must name the factory building the automation driver, "
            "formula engine and authenticator."
        )
    try:
        return load_collaborator_factory(import_path)
    except CollaboratorLoadingError as exc:
        raise RunExecutionError(str(exc)) from exc


def _resolve_run_directory(request: RunRequest, test_plan: TestPlan, run_id: str) -> Path:
    destination = (
        Path(request.output_dir)
        if request.output_dir
        else test_plan.path.parent / DEFAULT_OUTPUT_DIRNAME
    )
    timestamp = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    return destination / f"{timestamp}_{run_id[:6]}"


async def _execute_browser_runs(
    *,
    request: RunRequest,
    test_plan: TestPlan,
    collaborator_factory: CollaboratorFactory,
    reporter: InMemoryTestReporter,
    file_system: FileSystem,
) -> RunOutcome:
    suite = test_plan.test_suite
    run_id = reporter.create_test_run(suite.name, suite.description)
    run_directory = _resolve_run_directory(request, test_plan, run_id)
    try:
        file_system.create_directory(run_directory)
    except OSError as exc:
        raise RunExecutionError(f"Cannot create run directory {run_directory}: {exc}") from exc

    url_mapper = TemplateUrlMapper(
        test_plan.extensions.app_url_template or DEFAULT_APP_URL_TEMPLATE
    )
    logger_factory = SuiteLoggerFactory()
    counters = OutcomeCounters()
    try:
        for browser_config in test_plan.test_settings.browser_configurations:
            state = RunState(test_settings=test_plan.test_settings)
            collaborators = _build_collaborators(
                collaborator_factory,
                CollaboratorContext(state=state, test_plan=test_plan, file_system=file_system),
            )
            runner = SingleSuiteRunner(
                reporter=reporter,
                formula_engine=collaborators.formula_engine,
                automation_driver=collaborators.automation_driver,
                authenticator=collaborators.authenticator,
                state=state,
                url_mapper=url_mapper,
                file_system=file_system,
                logger_factory=logger_factory,
            )
            await runner.run_test(
                run_id,
                run_directory,
                suite,
                browser_config,
                request.domain,
                request.query_params,
            )
            counters = counters + runner.counters
    finally:
        # Cases reported before a failing browser run still reach the workbook.
        reporter.end_test_run(run_id)
        logger_factory.close()
        output_path = write_results_workbook(
            reporter.get_test_run(run_id), run_directory / RESULTS_FILE_NAME
        )
        _LOGGER.info("Results written to %s", output_path)

    return RunOutcome(
        output_path=output_path,
        run_directory=run_directory.resolve(),
        counters=counters,
    )


def _build_collaborators(
    collaborator_factory: CollaboratorFactory, context: CollaboratorContext
) -> RunCollaborators:
    try:
        return collaborator_factory(context)
    except Exception as exc:  # pylint: disable=broad-exception-caught
        raise RunExecutionError(f"Collaborator factory failed: {exc}") from exc
