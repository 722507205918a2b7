"""Formula parser: runs placeholder filters, then evaluates the result."""

import logging
import re
from typing import Iterable, Optional, Pattern, Union

from ..filters import Filter
from .evaluator import EvaluationError, Number, evaluate
from .models import FormulaEvaluation

logger = logging.getLogger(__name__)

# {anything} without nested braces - what an unresolved placeholder looks like
UNRESOLVED_PATTERN: Pattern = re.compile(r"\{[^{}]*\}")


def find_unresolved_placeholders(text: str) -> list[str]:
    """
    Find placeholder-looking fragments left in a formula.

    Args:
        text: A formula after substitution

    Returns:
        Each ``{...}`` fragment, in order of appearance, without duplicates
    """
    found: list[str] = []
    for match in UNRESOLVED_PATTERN.finditer(text):
        if match.group(0) not in found:
            found.append(match.group(0))
    return found


def _flatten(filters: tuple) -> list[Filter]:
    """Accept both ``f(a, b)`` and ``f([a, b])`` call styles."""
    if len(filters) == 1 and isinstance(filters[0], (list, tuple)):
        return list(filters[0])
    return list(filters)


def apply_filters(formula: str, *filters: Union[Filter, Iterable[Filter]]) -> str:
    """
    Apply filters to a formula in list order.

    Later filters see the output of earlier ones. Exceptions raised by a
    replacer propagate to the caller.
    """
    for placeholder_filter in _flatten(filters):
        formula = placeholder_filter.apply(formula)
        logger.debug(f"{placeholder_filter!r} -> {formula!r}")
    return formula


class FormulaParser:
    """Substitutes placeholders in math formulas and evaluates them."""

    @staticmethod
    def evaluate_formula(formula: str, *filters: Union[Filter, Iterable[Filter]]) -> FormulaEvaluation:
        """
        Substitute and evaluate a formula, keeping diagnostics.

        Args:
            formula: Math formula with placeholders
            filters: Filters used to replace the placeholders, in order

        Returns:
            FormulaEvaluation with the result or the error that stopped it
        """
        filter_list = _flatten(filters)
        substituted: Optional[str] = None

        try:
            substituted = apply_filters(formula, filter_list)
            result = evaluate(substituted)
        except Exception as e:
            name = e.name if isinstance(e, EvaluationError) else type(e).__name__
            message = e.message if isinstance(e, EvaluationError) else str(e)
            logger.warning(
                f"An error occurred while parsing formula {substituted or formula!r} "
                f"with filters: {filter_list!r}"
            )
            logger.warning(f"{name}: {message}")
            return FormulaEvaluation(
                formula=formula,
                substituted=substituted,
                error=f"{name}: {message}",
                unresolved=find_unresolved_placeholders(substituted or formula),
            )

        return FormulaEvaluation(formula=formula, substituted=substituted, result=result)

    @classmethod
    def parse_formula(cls, formula: str, *filters: Union[Filter, Iterable[Filter]]) -> Optional[Number]:
        """
        Substitute placeholders and evaluate the formula.

        Args:
            formula: Math formula with placeholders
            filters: Filters used to replace the placeholders, in order

        Returns:
            The numeric result, or None if the formula could not be computed.
            Never raises.
        """
        return cls.evaluate_formula(formula, *filters).result


def parse_formula(formula: str, *filters: Union[Filter, Iterable[Filter]]) -> Optional[Number]:
    """Module-level shortcut for :meth:`FormulaParser.parse_formula`."""
    return FormulaParser.parse_formula(formula, *filters)
