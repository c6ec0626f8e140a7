"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import click

from simple_suite_runner.configuration import (
    DEFAULT_CONFIG_FILENAME,
    write_placeholder_test_plan,
)
from simple_suite_runner.run_execution import (
    RunExecutionError,
    RunRequest,
    execute_suite_run,
)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="simple-suite-runner")
def cli() -> None:
    """Formula-driven browser test suite runner."""


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML test plan template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML test plan with guidance comments."""
    try:
        resolved_output = write_placeholder_test_plan(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="run")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the YAML/JSON test plan",
)
@click.option(
    "--output-dir",
    "output_dir",
    required=False,
    type=click.Path(path_type=str),
    help="Directory receiving run directories (defaults to TestOutput next to the plan)",
)
@click.option(
    "--domain",
    default="",
    help="Domain substituted into the application URL template",
)
@click.option(
    "--query-params",
    "query_params",
    default="",
    help="Query string appended to the application URL",
)
@click.option(
    "--log-level",
    "log_level",
    default="INFO",
    show_default=True,
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Console logging level",
)
def run_tests(
    config_path: str, output_dir: str | None, domain: str, query_params: str, log_level: str
) -> None:
    """Run the test suite of a test plan once per configured browser."""
    try:
        with _console_logging(log_level.upper()):
            outcome = execute_suite_run(
                RunRequest(
                    config_path=config_path,
                    output_dir=output_dir,
                    domain=domain,
                    query_params=query_params,
                )
            )
    except RunExecutionError as exc:
        raise CliError(str(exc)) from exc
    counters = outcome.counters
    click.echo(
        f"total={counters.total} passed={counters.passed} "
        f"skipped={counters.skipped} failed={counters.failed}"
    )
    click.echo(str(outcome.output_path))


@contextmanager
def _console_logging(level: str) -> Iterator[None]:
    """Echo package log records at `level` or above to stderr for the duration of a run.

    Suite loggers stay at DEBUG so their log files are complete; only the console
    handler filters by level.
    """
    package_logger = logging.getLogger("simple_suite_runner")
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    previous_level = package_logger.level
    package_logger.setLevel(level)
    package_logger.addHandler(handler)
    try:
        yield
    finally:
        package_logger.removeHandler(handler)
        package_logger.setLevel(previous_level)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
