"""Run execution domain exports."""

from .collaborator_contracts import CollaboratorContext, CollaboratorFactory, RunCollaborators
from .run_contracts import OutcomeCounters, RunOutcome, RunRequest, StepOutcome
from .single_suite_runner import SingleSuiteRunner, SuiteRunnerReuseError
from .suite_run_use_case import RunExecutionError, execute_suite_run

__all__ = [
    "CollaboratorContext",
    "CollaboratorFactory",
    "OutcomeCounters",
    "RunCollaborators",
    "RunExecutionError",
    "RunOutcome",
    "RunRequest",
    "SingleSuiteRunner",
    "StepOutcome",
    "SuiteRunnerReuseError",
    "execute_suite_run",
]
