"""File system exports."""

from .local_file_system import LocalFileSystem

__all__ = ["LocalFileSystem"]
