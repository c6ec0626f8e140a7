"""Per-suite loggers with nested scopes."""

from __future__ import annotations

import logging
from collections.abc import Iterator, MutableMapping
from contextlib import contextmanager
from typing import Any

from .log_capture import SuiteLogSink

SUITE_LOGGER_NAMESPACE = "simple_suite_runner.suite"


class SuiteLogger(logging.LoggerAdapter):
    """Logger adapter tagging every record with the scope ids currently open."""

    def __init__(self, logger: logging.Logger) -> None:
        super().__init__(logger, {})
        self._scopes: list[str] = []

    @property
    def scopes(self) -> tuple[str, ...]:
        return tuple(self._scopes)

    @contextmanager
    def begin_scope(self, scope_id: str) -> Iterator[None]:
        self._scopes.append(scope_id)
        try:
            yield
        finally:
            self._scopes.pop()

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra["scopes"] = tuple(self._scopes)
        kwargs["extra"] = extra
        return msg, kwargs


class SuiteLoggerFactory:
    """Creates one logger and one log sink per suite id."""

    def __init__(self, level: int = logging.DEBUG) -> None:
        self._level = level
        self._sinks: dict[str, SuiteLogSink] = {}

    def create_logger(self, scope_id: str) -> SuiteLogger:
        logger = logging.getLogger(f"{SUITE_LOGGER_NAMESPACE}.{scope_id}")
        logger.setLevel(self._level)
        sink = self.log_sink(scope_id)
        if sink not in logger.handlers:
            logger.addHandler(sink)
        return SuiteLogger(logger)

    def log_sink(self, scope_id: str) -> SuiteLogSink:
        sink = self._sinks.get(scope_id)
        if sink is None:
            sink = SuiteLogSink()
            self._sinks[scope_id] = sink
        return sink

    def close(self) -> None:
        """Detach every sink from its suite logger."""
        for scope_id, sink in self._sinks.items():
            logging.getLogger(f"{SUITE_LOGGER_NAMESPACE}.{scope_id}").removeHandler(sink)
            sink.close()
        self._sinks.clear()
