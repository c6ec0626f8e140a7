"""Suite logging exports."""

from .log_capture import LOGS_FILE_NAME, SuiteLogSink
from .suite_logger import SUITE_LOGGER_NAMESPACE, SuiteLogger, SuiteLoggerFactory

__all__ = [
    "LOGS_FILE_NAME",
    "SUITE_LOGGER_NAMESPACE",
    "SuiteLogSink",
    "SuiteLogger",
    "SuiteLoggerFactory",
]
