"""In-memory capture of suite log lines, flushed into result directories."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

LOGS_FILE_NAME = "logs.txt"
DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"


class SuiteLogSink(logging.Handler):
    """Logging handler buffering every line emitted for one suite.

    Records carry the scope ids that were open when they were emitted, so the
    lines of a single test case can be written on their own.
    """

    def __init__(self, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT))
        self._lines: list[tuple[tuple[str, ...], str]] = []
        self._lines_lock = threading.Lock()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record)
        except Exception:  # pylint: disable=broad-exception-caught
            self.handleError(record)
            return
        scopes = tuple(getattr(record, "scopes", ()))
        with self._lines_lock:
            self._lines.append((scopes, line))

    def lines_for(self, test_id: str | None = None) -> list[str]:
        """Return captured lines for one test id, or every line when it is None."""
        with self._lines_lock:
            return [
                line for scopes, line in self._lines if test_id is None or test_id in scopes
            ]

    def write_logs(self, directory: Path | str, test_id: str | None = None) -> Path:
        """Write captured lines into `<directory>/logs.txt` and return the file path."""
        destination = Path(directory) / LOGS_FILE_NAME
        destination.parent.mkdir(parents=True, exist_ok=True)
        lines = self.lines_for(test_id)
        destination.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
        return destination
