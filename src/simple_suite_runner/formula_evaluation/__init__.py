"""Formula evaluation exports."""

from .formula_engine import FormulaEngine, RetryableEvaluationError

__all__ = ["FormulaEngine", "RetryableEvaluationError"]
