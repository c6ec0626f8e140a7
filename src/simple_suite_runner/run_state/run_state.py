"""Mutable context of a single suite run."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from simple_suite_runner.configuration.runtime_settings import (
    DEFAULT_TIMEOUT_MS,
    BrowserConfiguration,
    SuiteDefinition,
    TestSettings,
)


@dataclass
class RunState:  # pylint: disable=too-many-instance-attributes
    """Context read and written by every phase of one suite run.

    A run state belongs to exactly one runner invocation. Collaborators built
    for that run may hold a reference to it to read the browser
    configuration, the current result directory or the suite logger.
    """

    test_settings: TestSettings | None = None
    run_id: str | None = None
    suite_id: str | None = None
    test_id: str | None = None
    suite_definition: SuiteDefinition | None = None
    browser_config: BrowserConfiguration | None = None
    result_directory: Path | None = None
    logger: logging.Logger | logging.LoggerAdapter | None = None

    @property
    def timeout_ms(self) -> int:
        if self.test_settings is None:
            return DEFAULT_TIMEOUT_MS
        return self.test_settings.timeout_ms
