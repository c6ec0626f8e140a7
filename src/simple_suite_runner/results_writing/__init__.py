"""Results writing domain exports."""

from .report_models import SuiteRecord, TestRecord, TestRunRecord, TestStatus
from .run_report_writer import RESULTS_SHEET_NAME, RUN_INFO_SHEET_NAME, write_results_workbook
from .run_reporter import InMemoryTestReporter, ReportingError

__all__ = [
    "InMemoryTestReporter",
    "ReportingError",
    "RESULTS_SHEET_NAME",
    "RUN_INFO_SHEET_NAME",
    "SuiteRecord",
    "TestRecord",
    "TestRunRecord",
    "TestStatus",
    "write_results_workbook",
]
