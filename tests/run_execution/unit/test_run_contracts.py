"""Tests for run execution domain entities."""

from __future__ import annotations

from pathlib import Path

from simple_suite_runner.run_execution.run_contracts import (
    OutcomeCounters,
    RunOutcome,
    RunRequest,
    StepOutcome,
)


def test_run_request_defaults_to_plan_output_and_no_url_context() -> None:
    request = RunRequest(config_path="testPlan.yaml")

    assert request.output_dir is None
    assert request.domain == ""
    assert request.query_params == ""


def test_outcome_counters_add_up_per_field() -> None:
    combined = OutcomeCounters(total=2, passed=1, failed=1) + OutcomeCounters(total=3, passed=3)

    assert combined == OutcomeCounters(total=5, passed=4, skipped=0, failed=1)


def test_run_outcome_contains_resolved_output_path_and_counters() -> None:
    outcome = RunOutcome(
        output_path=Path("/tmp/run/results.xlsx"),
        run_directory=Path("/tmp/run"),
        counters=OutcomeCounters(total=1, passed=1),
    )

    assert outcome.output_path.name == "results.xlsx"
    assert outcome.counters.passed == 1


def test_step_outcome_constructors() -> None:
    error = RuntimeError("boom")

    assert StepOutcome.passed().succeeded is True
    assert StepOutcome.passed().error is None
    assert StepOutcome.failed(error).succeeded is False
    assert StepOutcome.failed(error).error is error
