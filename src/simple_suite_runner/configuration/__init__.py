"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_test_plan,
    write_placeholder_test_plan,
)
from .loader import ConfigurationError, load_test_plan
from .runtime_settings import (
    BrowserConfiguration,
    ExtensionSettings,
    SuiteDefinition,
    TestCaseDefinition,
    TestPlan,
    TestSettings,
    UserConfiguration,
)

__all__ = [
    "BrowserConfiguration",
    "ExtensionSettings",
    "SuiteDefinition",
    "TestCaseDefinition",
    "TestPlan",
    "TestSettings",
    "UserConfiguration",
    "ConfigurationError",
    "load_test_plan",
    "DEFAULT_CONFIG_FILENAME",
    "build_placeholder_test_plan",
    "write_placeholder_test_plan",
]
