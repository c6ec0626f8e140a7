"""Base class for formula engines driving the application under test."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from simple_suite_runner.configuration.runtime_settings import DEFAULT_TIMEOUT_MS
from simple_suite_runner.polling import PollingTimeoutError, poll_async_with_value
from simple_suite_runner.polling.bounded_retry import DEFAULT_ASYNC_INTERVAL_SECONDS
from simple_suite_runner.run_state import RunState

_LOGGER = logging.getLogger(__name__)


class RetryableEvaluationError(Exception):
    """Raised by an engine when an evaluation may succeed if attempted again.

    Typical causes are controls that are not rendered yet or a model that is
    still being refreshed.
    """


@dataclass(frozen=True)
class _EvaluationAttempt:
    """Result of one evaluation attempt inside a retry loop."""

    retry: bool
    value: Any = None
    error: RetryableEvaluationError | None = None


class FormulaEngine(ABC):
    """Evaluates formula expressions against the application under test.

    Subclasses implement single-attempt evaluation. `evaluate_with_retry`
    repeats it while the engine reports a `RetryableEvaluationError`, bounded
    by `timeout_ms`. Diagnostics go to the suite logger bound in the run
    state, once there is one.
    """

    retry_interval_seconds: float = DEFAULT_ASYNC_INTERVAL_SECONDS

    def __init__(self, state: RunState | None = None, *, timeout_ms: int | None = None) -> None:
        self.state = state
        if timeout_ms is None:
            timeout_ms = state.timeout_ms if state is not None else DEFAULT_TIMEOUT_MS
        self.timeout_ms = timeout_ms

    @property
    def logger(self) -> logging.Logger | logging.LoggerAdapter:
        if self.state is not None and self.state.logger is not None:
            return self.state.logger
        return _LOGGER

    @abstractmethod
    def setup(self) -> None:
        """Prepare the engine once per run."""

    @abstractmethod
    async def refresh_model(self) -> None:
        """Reload the model of the application (controls, properties, data)."""

    @abstractmethod
    async def evaluate(self, expression: str) -> Any:
        """Evaluate `expression` once and return its value."""

    async def evaluate_with_retry(self, expression: str) -> Any:
        """Evaluate `expression` until it stops raising a retryable fault.

        Non-retryable errors propagate from the first attempt that raises them.

        Raises:
          PollingTimeoutError: If retryable faults persist beyond `timeout_ms`.
        """
        last_attempt = _EvaluationAttempt(retry=True)

        async def _attempt(_previous: _EvaluationAttempt) -> _EvaluationAttempt:
            nonlocal last_attempt
            try:
                value = await self.evaluate(expression)
            except RetryableEvaluationError as exc:
                self.logger.debug("Evaluation will be retried: %s", exc)
                last_attempt = _EvaluationAttempt(retry=True, error=exc)
            else:
                last_attempt = _EvaluationAttempt(retry=False, value=value)
            return last_attempt

        try:
            settled = await poll_async_with_value(
                last_attempt,
                lambda attempt: attempt.retry,
                _attempt,
                self.timeout_ms,
                self.logger,
                interval_seconds=self.retry_interval_seconds,
            )
        except PollingTimeoutError as exc:
            # The attempt that crossed the deadline may still have succeeded.
            if not last_attempt.retry:
                return last_attempt.value
            raise exc from last_attempt.error
        return settled.value
