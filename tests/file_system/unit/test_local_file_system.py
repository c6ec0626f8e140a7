"""Local file system tests."""

from __future__ import annotations

from pathlib import Path

from simple_suite_runner.file_system import LocalFileSystem


def test_create_directory_creates_missing_parents(tmp_path: Path) -> None:
    target = tmp_path / "run" / "suite" / "case"

    LocalFileSystem().create_directory(target)
    LocalFileSystem().create_directory(target)

    assert target.is_dir()


def test_list_files_returns_sorted_files_only(tmp_path: Path) -> None:
    (tmp_path / "b.png").write_bytes(b"")
    (tmp_path / "a.txt").write_text("log", encoding="utf-8")
    (tmp_path / "nested").mkdir()

    files = LocalFileSystem().list_files(tmp_path)

    assert files == [str(tmp_path / "a.txt"), str(tmp_path / "b.png")]


def test_list_files_returns_none_for_missing_directory(tmp_path: Path) -> None:
    assert LocalFileSystem().list_files(tmp_path / "missing") is None


def test_sanitize_name_removes_invalid_characters() -> None:
    assert LocalFileSystem().sanitize_name('Login: "happy"/path?*') == "Login happypath"
