"""Test plan domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEFAULT_TIMEOUT_MS = 30000


@dataclass(frozen=True)
class TestCaseDefinition:
    """One test case of a suite."""

    __test__ = False

    name: str
    description: str
    steps: str


@dataclass(frozen=True)
class SuiteDefinition:  # pylint: disable=too-many-instance-attributes
    """Suite metadata, lifecycle hooks and ordered test cases."""

    name: str
    description: str
    app_logical_name: str
    persona: str
    test_cases: tuple[TestCaseDefinition, ...]
    on_test_case_start: str | None = None
    on_test_case_complete: str | None = None
    on_test_suite_complete: str | None = None


@dataclass(frozen=True)
class BrowserConfiguration:
    """Browser used for one run of the suite."""

    browser: str
    device: str | None = None
    screen_width: int | None = None
    screen_height: int | None = None


@dataclass(frozen=True)
class TestSettings:
    """Settings shared by every browser run of a test plan."""

    __test__ = False

    browser_configurations: tuple[BrowserConfiguration, ...]
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    headless: bool = True
    record_video: bool = False


@dataclass(frozen=True)
class UserConfiguration:
    """Persona credentials, referenced by environment variable names."""

    persona_name: str
    email_key: str
    password_key: str


@dataclass(frozen=True)
class ExtensionSettings:
    """Wiring for collaborators provided outside this package."""

    collaborators: str | None = None
    app_url_template: str | None = None


@dataclass(frozen=True)
class TestPlan:
    """Top-level test plan aggregate."""

    __test__ = False

    path: Path
    test_suite: SuiteDefinition
    test_settings: TestSettings
    users: tuple[UserConfiguration, ...]
    extensions: ExtensionSettings
