"""Test plan scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "testPlan.yaml"

_TEST_PLAN_SCAFFOLD_TEMPLATE = """# Test plan template for simple-suite-runner.
# Replace every <REQUIRED> placeholder before running.
# Replace <OPTIONAL> placeholders only when your setup needs them.

testSuite:
  testSuiteName: "<REQUIRED>"
  testSuiteDescription: "<OPTIONAL>"
  # persona must match one of environmentVariables.users[].personaName.
  persona: "<REQUIRED>"
  appLogicalName: "<REQUIRED>"
  # Hooks are formula expressions evaluated once; a failing hook is logged
  # and never changes a test case result.
  # onTestCaseStart: "<OPTIONAL>"
  # onTestCaseComplete: "<OPTIONAL>"
  # onTestSuiteComplete: "<OPTIONAL>"
  testCases:
    - testCaseName: "<REQUIRED>"
      testCaseDescription: "<OPTIONAL>"
      testSteps: "<REQUIRED>"

testSettings:
  browserConfigurations:
    - browser: "<REQUIRED>"
      # device: "<OPTIONAL>"
      # screenWidth and screenHeight must be set together.
      # screenWidth: "<OPTIONAL>"
      # screenHeight: "<OPTIONAL>"
  # Retry timeout for test steps, in milliseconds.
  timeout: 30000
  headless: true
  recordVideo: false

environmentVariables:
  users:
    - personaName: "<REQUIRED>"
      emailKey: "<REQUIRED>"
      passwordKey: "<REQUIRED>"

extensions:
  # Import path of the factory building the automation driver, formula engine
  # and authenticator, written as package.module:attribute.
  collaborators: "<REQUIRED>"
  # appUrlTemplate: "https://{domain}/play/{app_logical_name}"
"""


def build_placeholder_test_plan() -> str:
    """Build a YAML test plan template with placeholders and inline guidance."""
    return _TEST_PLAN_SCAFFOLD_TEMPLATE


def write_placeholder_test_plan(output_path: Path | str) -> Path:
    """Write the placeholder test plan template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Test plan file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_test_plan(), encoding="utf-8")
    return destination.resolve()
