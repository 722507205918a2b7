"""Formula parsing: placeholder substitution followed by arithmetic evaluation."""

from .evaluator import EvaluationError, SafeEvaluator, evaluate
from .models import FormulaEvaluation, KeyedFilterSpec
from .parser import FormulaParser, apply_filters, find_unresolved_placeholders, parse_formula
from .builder import build_filters

__all__ = [
    "EvaluationError",
    "SafeEvaluator",
    "evaluate",
    "FormulaEvaluation",
    "KeyedFilterSpec",
    "FormulaParser",
    "apply_filters",
    "find_unresolved_placeholders",
    "parse_formula",
    "build_filters",
]
