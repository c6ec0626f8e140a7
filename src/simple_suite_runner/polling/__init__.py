"""Bounded polling exports."""

from .bounded_retry import PollingTimeoutError, poll, poll_async, poll_async_with_value

__all__ = [
    "PollingTimeoutError",
    "poll",
    "poll_async",
    "poll_async_with_value",
]
