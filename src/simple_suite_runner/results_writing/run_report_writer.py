"""Results workbook writer service."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from .report_models import TestRecord, TestRunRecord, TestStatus

RESULTS_SHEET_NAME = "Results"
RUN_INFO_SHEET_NAME = "RunInfo"

RESULT_COLUMNS = (
    ("Suite", 24),
    ("Test", 32),
    ("Description", 32),
    ("Status", 12),
    ("Started", 28),
    ("Ended", 28),
    ("Duration (ms)", 14),
    ("Details", 50),
    ("Artifacts", 50),
    ("Error", 50),
    ("Stack trace", 50),
)


@dataclass(frozen=True)
class _RunCounts:
    """Computed run-level counters for the RunInfo sheet."""

    total: int
    passed: int
    failed: int
    unfinished: int


def write_results_workbook(test_run: TestRunRecord, output_path: Path | str) -> Path:
    """Write one row per reported test plus a RunInfo sheet and return the resolved path."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = RESULTS_SHEET_NAME
    _write_result_headers(sheet)
    _write_result_rows(sheet, test_run)
    _write_run_info_sheet(workbook, test_run)

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(output)
    return output.resolve()


def _write_result_headers(sheet) -> None:
    for column, (label, width) in enumerate(RESULT_COLUMNS, start=1):
        sheet.cell(row=1, column=column, value=label)
        sheet.cell(row=1, column=column).style = "Headline 1"
        sheet.column_dimensions[get_column_letter(column)].width = width
    sheet.freeze_panes = "A2"


def _write_result_rows(sheet, test_run: TestRunRecord) -> None:
    row = 2
    for suite in test_run.suites.values():
        for test_id in suite.test_ids:
            test = test_run.tests[test_id]
            values = (
                suite.name,
                test.name,
                test.description,
                test.status.value,
                _format_timestamp(test.started_at),
                _format_timestamp(test.ended_at),
                _duration_ms(test),
                test.details,
                _format_artifacts(test.artifacts),
                test.error_message,
                test.stack_trace,
            )
            for column, value in enumerate(values, start=1):
                sheet.cell(row=row, column=column, value=value)
            row += 1


def _write_run_info_sheet(workbook, test_run: TestRunRecord) -> None:
    sheet = workbook.create_sheet(RUN_INFO_SHEET_NAME)
    counts = _calculate_run_counts(list(test_run.tests.values()))
    entries = (
        ("run_id", test_run.run_id),
        ("name", test_run.name),
        ("description", test_run.description),
        ("run_start", _format_timestamp(test_run.started_at)),
        ("run_end", _format_timestamp(test_run.ended_at)),
        ("suites", len(test_run.suites)),
        ("total", counts.total),
        ("passed", counts.passed),
        ("failed", counts.failed),
        ("unfinished", counts.unfinished),
    )
    for row, (key, value) in enumerate(entries, start=1):
        sheet.cell(row=row, column=1, value=key)
        sheet.cell(row=row, column=2, value=value)


def _calculate_run_counts(tests: Sequence[TestRecord]) -> _RunCounts:
    passed = sum(1 for test in tests if test.status == TestStatus.PASSED)
    failed = sum(1 for test in tests if test.status == TestStatus.FAILED)
    return _RunCounts(
        total=len(tests),
        passed=passed,
        failed=failed,
        unfinished=len(tests) - passed - failed,
    )


def _duration_ms(test: TestRecord) -> int | None:
    if test.started_at is None or test.ended_at is None:
        return None
    return int((test.ended_at - test.started_at).total_seconds() * 1000)


def _format_timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _format_artifacts(artifacts: Sequence[str]) -> str:
    return "\n".join(artifacts)
