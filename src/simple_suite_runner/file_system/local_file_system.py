"""Local disk implementation of the file system used by suite runs."""

from __future__ import annotations

import re
from pathlib import Path

INVALID_NAME_CHARACTERS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


class LocalFileSystem:
    """File system backed by the local disk."""

    def create_directory(self, path: Path | str) -> None:
        Path(path).mkdir(parents=True, exist_ok=True)

    def list_files(self, path: Path | str) -> list[str] | None:
        """Return the files directly inside `path`, or None when it does not exist."""
        directory = Path(path)
        if not directory.is_dir():
            return None
        return sorted(str(entry) for entry in directory.iterdir() if entry.is_file())

    def sanitize_name(self, name: str) -> str:
        """Strip characters that cannot appear in a file or directory name."""
        return INVALID_NAME_CHARACTERS.sub("", name)
