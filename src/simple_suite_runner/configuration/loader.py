"""Test plan loader service."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import (
    DEFAULT_TIMEOUT_MS,
    BrowserConfiguration,
    ExtensionSettings,
    SuiteDefinition,
    TestCaseDefinition,
    TestPlan,
    TestSettings,
    UserConfiguration,
)


class ConfigurationError(Exception):
    """Raised when the test plan file is invalid."""


def load_test_plan(plan_path: Path | str) -> TestPlan:
    """Load and validate the test plan file."""
    path = Path(plan_path)
    if not path.exists():
        raise ConfigurationError(f"Test plan file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:  # pragma: no cover - exercised indirectly
        raise ConfigurationError(f"Failed to parse test plan file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Test plan root must be a mapping.")

    test_suite = _parse_test_suite_section(parsed.get("testSuite"))
    test_settings = _parse_test_settings_section(parsed.get("testSettings"))
    users = _parse_users_section(parsed.get("environmentVariables"))
    extensions = _parse_extensions_section(parsed.get("extensions"))

    declared_personas = {user.persona_name for user in users}
    if test_suite.persona not in declared_personas:
        raise ConfigurationError(
            f"testSuite.persona '{test_suite.persona}' is not declared in "
            "environmentVariables.users."
        )

    return TestPlan(
        path=path,
        test_suite=test_suite,
        test_settings=test_settings,
        users=users,
        extensions=extensions,
    )


def _parse_test_suite_section(value: Any) -> SuiteDefinition:
    section = _require_mapping(value, "testSuite")
    name = _require_non_empty_string(section.get("testSuiteName"), "testSuite.testSuiteName")
    description = _optional_string(
        section.get("testSuiteDescription"), "testSuite.testSuiteDescription"
    )
    persona = _require_non_empty_string(section.get("persona"), "testSuite.persona")
    app_logical_name = _require_non_empty_string(
        section.get("appLogicalName"), "testSuite.appLogicalName"
    )
    return SuiteDefinition(
        name=name,
        description=description or "",
        app_logical_name=app_logical_name,
        persona=persona,
        test_cases=_parse_test_cases(section.get("testCases")),
        on_test_case_start=_optional_string(
            section.get("onTestCaseStart"), "testSuite.onTestCaseStart"
        ),
        on_test_case_complete=_optional_string(
            section.get("onTestCaseComplete"), "testSuite.onTestCaseComplete"
        ),
        on_test_suite_complete=_optional_string(
            section.get("onTestSuiteComplete"), "testSuite.onTestSuiteComplete"
        ),
    )


def _parse_test_cases(value: Any) -> tuple[TestCaseDefinition, ...]:
    entries = _require_sequence(value, "testSuite.testCases")
    if not entries:
        raise ConfigurationError("testSuite.testCases must contain at least one test case.")
    test_cases = []
    for index, entry in enumerate(entries):
        label = f"testSuite.testCases[{index}]"
        mapping = _require_mapping(entry, label)
        description = _optional_string(
            mapping.get("testCaseDescription"), f"{label}.testCaseDescription"
        )
        test_cases.append(
            TestCaseDefinition(
                name=_require_non_empty_string(
                    mapping.get("testCaseName"), f"{label}.testCaseName"
                ),
                description=description or "",
                steps=_require_non_empty_string(mapping.get("testSteps"), f"{label}.testSteps"),
            )
        )
    return tuple(test_cases)


def _parse_test_settings_section(value: Any) -> TestSettings:
    section = _require_mapping(value, "testSettings")
    entries = _require_sequence(
        section.get("browserConfigurations"), "testSettings.browserConfigurations"
    )
    if not entries:
        raise ConfigurationError(
            "testSettings.browserConfigurations must contain at least one browser."
        )
    browser_configurations = tuple(
        _parse_browser_configuration(entry, f"testSettings.browserConfigurations[{index}]")
        for index, entry in enumerate(entries)
    )
    timeout_ms = _require_non_negative_int(
        section.get("timeout", DEFAULT_TIMEOUT_MS), "testSettings.timeout"
    )
    return TestSettings(
        browser_configurations=browser_configurations,
        timeout_ms=timeout_ms,
        headless=bool(section.get("headless", True)),
        record_video=bool(section.get("recordVideo", False)),
    )


def _parse_browser_configuration(value: Any, label: str) -> BrowserConfiguration:
    mapping = _require_mapping(value, label)
    browser = _require_non_empty_string(mapping.get("browser"), f"{label}.browser")
    device = _optional_string(mapping.get("device"), f"{label}.device")
    screen_width = mapping.get("screenWidth")
    screen_height = mapping.get("screenHeight")
    if (screen_width is None) != (screen_height is None):
        raise ConfigurationError(
            f"{label} must set both screenWidth and screenHeight, or neither."
        )
    if screen_width is not None:
        screen_width = _require_positive_int(screen_width, f"{label}.screenWidth")
        screen_height = _require_positive_int(screen_height, f"{label}.screenHeight")
    return BrowserConfiguration(
        browser=browser,
        device=device,
        screen_width=screen_width,
        screen_height=screen_height,
    )


def _parse_users_section(value: Any) -> tuple[UserConfiguration, ...]:
    section = _require_mapping(value, "environmentVariables")
    entries = _require_sequence(section.get("users"), "environmentVariables.users")
    users = []
    for index, entry in enumerate(entries):
        label = f"environmentVariables.users[{index}]"
        mapping = _require_mapping(entry, label)
        users.append(
            UserConfiguration(
                persona_name=_require_non_empty_string(
                    mapping.get("personaName"), f"{label}.personaName"
                ),
                email_key=_require_non_empty_string(mapping.get("emailKey"), f"{label}.emailKey"),
                password_key=_require_non_empty_string(
                    mapping.get("passwordKey"), f"{label}.passwordKey"
                ),
            )
        )
    return tuple(users)


def _parse_extensions_section(value: Any) -> ExtensionSettings:
    if value is None:
        return ExtensionSettings()
    section = _require_mapping(value, "extensions")
    collaborators = _optional_string(section.get("collaborators"), "extensions.collaborators")
    if collaborators is not None and ":" not in collaborators:
        raise ConfigurationError(
            "extensions.collaborators must use the 'package.module:attribute' form."
        )
    return ExtensionSettings(
        collaborators=collaborators,
        app_url_template=_optional_string(
            section.get("appUrlTemplate"), "extensions.appUrlTemplate"
        ),
    )


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Test plan section '{section_name}' is required.")
    return value


def _require_sequence(value: Any, field_name: str) -> Sequence[Any]:
    if isinstance(value, str) or not isinstance(value, Sequence):
        raise ConfigurationError(f"{field_name} must be a list.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None


def _require_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    return value


def _require_positive_int(value: Any, field_name: str) -> int:
    number = _require_int(value, field_name)
    if number <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return number


def _require_non_negative_int(value: Any, field_name: str) -> int:
    number = _require_int(value, field_name)
    if number < 0:
        raise ConfigurationError(f"{field_name} must not be negative.")
    return number
