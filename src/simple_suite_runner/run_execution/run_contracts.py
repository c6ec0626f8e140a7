"""Run execution entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class RunRequest:
    """Input contract for executing one run."""

    config_path: str
    output_dir: str | None = None
    domain: str = ""
    query_params: str = ""


@dataclass
class OutcomeCounters:
    """Test case tallies of a run."""

    total: int = 0
    passed: int = 0
    skipped: int = 0
    failed: int = 0

    def __add__(self, other: OutcomeCounters) -> OutcomeCounters:
        return OutcomeCounters(
            total=self.total + other.total,
            passed=self.passed + other.passed,
            skipped=self.skipped + other.skipped,
            failed=self.failed + other.failed,
        )


@dataclass(frozen=True)
class RunOutcome:
    """Output contract for one completed run."""

    output_path: Path
    run_directory: Path
    counters: OutcomeCounters


@dataclass(frozen=True)
class StepOutcome:
    """Result of one phase of a test case: passed, or failed with the error raised."""

    error: Exception | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @staticmethod
    def passed() -> StepOutcome:
        return StepOutcome()

    @staticmethod
    def failed(error: Exception) -> StepOutcome:
        return StepOutcome(error=error)
