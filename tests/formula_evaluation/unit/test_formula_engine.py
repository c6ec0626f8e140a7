"""Formula engine retry tests."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import pytest
from simple_suite_runner.configuration.runtime_settings import (
    BrowserConfiguration,
    TestSettings,
)
from simple_suite_runner.formula_evaluation import FormulaEngine, RetryableEvaluationError
from simple_suite_runner.polling import PollingTimeoutError
from simple_suite_runner.run_state import RunState


class ScriptedFormulaEngine(FormulaEngine):
    """Engine replaying a scripted sequence of results or errors."""

    retry_interval_seconds = 0.0

    def __init__(self, script: list[Any], **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._script = list(script)
        self.evaluated: list[str] = []

    def setup(self) -> None:
        return None

    async def refresh_model(self) -> None:
        return None

    async def evaluate(self, expression: str) -> Any:
        self.evaluated.append(expression)
        outcome = self._script.pop(0) if len(self._script) > 1 else self._script[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def test_engine_reads_timeout_from_run_state() -> None:
    settings = TestSettings(
        browser_configurations=(BrowserConfiguration(browser="Chromium"),), timeout_ms=1234
    )

    engine = ScriptedFormulaEngine([True], state=RunState(test_settings=settings))

    assert engine.timeout_ms == 1234


def test_engine_uses_default_timeout_without_state() -> None:
    engine = ScriptedFormulaEngine([True])

    assert engine.timeout_ms == 30000
    assert engine.logger is logging.getLogger(
        "simple_suite_runner.formula_evaluation.formula_engine"
    )


def test_evaluate_with_retry_returns_first_value() -> None:
    engine = ScriptedFormulaEngine([42], timeout_ms=1000)

    assert asyncio.run(engine.evaluate_with_retry("Sum(1, 41)")) == 42
    assert engine.evaluated == ["Sum(1, 41)"]


def test_evaluate_with_retry_repeats_retryable_failures() -> None:
    engine = ScriptedFormulaEngine(
        [
            RetryableEvaluationError("control not ready"),
            RetryableEvaluationError("control not ready"),
            "done",
        ],
        timeout_ms=10_000,
    )

    assert asyncio.run(engine.evaluate_with_retry("Select(Button1)")) == "done"
    assert len(engine.evaluated) == 3


def test_evaluate_with_retry_propagates_non_retryable_errors() -> None:
    engine = ScriptedFormulaEngine([ValueError("bad formula"), "never"], timeout_ms=10_000)

    with pytest.raises(ValueError, match="bad formula"):
        asyncio.run(engine.evaluate_with_retry("Assert(false)"))
    assert len(engine.evaluated) == 1


def test_evaluate_with_retry_times_out_with_last_retryable_error_as_cause() -> None:
    retryable = RetryableEvaluationError("still loading")
    engine = ScriptedFormulaEngine([retryable], timeout_ms=0)
    engine.retry_interval_seconds = 0.01

    with pytest.raises(PollingTimeoutError) as exc_info:
        asyncio.run(engine.evaluate_with_retry("Wait()"))

    assert exc_info.value.__cause__ is retryable
