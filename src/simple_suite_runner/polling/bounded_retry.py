"""Bounded polling helpers used to wait for a condition until it settles or times out."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import TypeVar

T = TypeVar("T")

DEFAULT_BLOCKING_INTERVAL_SECONDS = 0.5
DEFAULT_ASYNC_INTERVAL_SECONDS = 1.0


class PollingTimeoutError(TimeoutError):
    """Raised when a polled condition does not settle within the timeout."""


def poll(
    value: T,
    keep_polling: Callable[[T], bool],
    produce: Callable[[], T] | None,
    timeout_ms: int,
    logger: logging.Logger | logging.LoggerAdapter,
    *,
    interval_seconds: float = DEFAULT_BLOCKING_INTERVAL_SECONDS,
) -> T:
    """Block until `keep_polling(value)` is false and return the last produced value.

    Args:
      value: Initial value handed to the predicate.
      keep_polling: Predicate deciding whether another attempt is needed.
      produce: Callable yielding the next value. When omitted the value is kept.
      timeout_ms: Maximum wall-clock time in milliseconds.
      logger: Logger receiving timeout diagnostics.
      interval_seconds: Pause between attempts.

    Raises:
      ValueError: If the timeout is negative.
      PollingTimeoutError: If the timeout elapses before the predicate turns false.
    """
    _validate_timeout(timeout_ms, logger)
    started = time.monotonic()

    while keep_polling(value):
        if produce is not None:
            value = produce()

        _raise_if_timed_out(started, timeout_ms, logger)
        time.sleep(interval_seconds)

    return value


async def poll_async(
    value: T,
    keep_polling: Callable[[T], bool],
    produce_next: Callable[[], Awaitable[T]] | None,
    timeout_ms: int,
    logger: logging.Logger | logging.LoggerAdapter,
    *,
    interval_seconds: float = DEFAULT_ASYNC_INTERVAL_SECONDS,
) -> T:
    """Cooperative variant of `poll` whose producer ignores the current value."""
    produce: Callable[[T], Awaitable[T]] | None = None
    if produce_next is not None:
        produce = lambda _current: produce_next()  # noqa: E731
    return await _poll_until_settled(
        value, keep_polling, produce, timeout_ms, logger, interval_seconds
    )


async def poll_async_with_value(
    value: T,
    keep_polling: Callable[[T], bool],
    produce: Callable[[T], Awaitable[T]] | None,
    timeout_ms: int,
    logger: logging.Logger | logging.LoggerAdapter,
    *,
    interval_seconds: float = DEFAULT_ASYNC_INTERVAL_SECONDS,
) -> T:
    """Cooperative variant of `poll` whose producer receives the current value."""
    return await _poll_until_settled(
        value, keep_polling, produce, timeout_ms, logger, interval_seconds
    )


async def _poll_until_settled(  # pylint: disable=too-many-arguments
    value: T,
    keep_polling: Callable[[T], bool],
    produce: Callable[[T], Awaitable[T]] | None,
    timeout_ms: int,
    logger: logging.Logger | logging.LoggerAdapter,
    interval_seconds: float,
) -> T:
    _validate_timeout(timeout_ms, logger)
    started = time.monotonic()

    while keep_polling(value):
        if produce is not None:
            value = await produce(value)

        _raise_if_timed_out(started, timeout_ms, logger)
        await asyncio.sleep(interval_seconds)

    return value


def _raise_if_timed_out(
    started: float, timeout_ms: int, logger: logging.Logger | logging.LoggerAdapter
) -> None:
    elapsed_ms = (time.monotonic() - started) * 1000
    if elapsed_ms > timeout_ms:
        logger.debug("Timeout duration was set to %s", timeout_ms)
        logger.debug(
            "Make sure the function or property you are waiting on is supported "
            "by the formula engine."
        )
        logger.error("Waiting timed out.")
        raise PollingTimeoutError(f"Waiting timed out after {timeout_ms} ms.")


def _validate_timeout(timeout_ms: int, logger: logging.Logger | logging.LoggerAdapter) -> None:
    if timeout_ms < 0:
        logger.error("The timeout setting cannot be less than zero.")
        raise ValueError(f"timeout_ms must not be negative, got {timeout_ms}.")
