"""StatFormula: placeholder substitution and evaluation for game-stat formulas.

Build one filter per placeholder, then hand a formula and the filters to
``parse_formula``::

    health = ReplacerFilter("{health}", lambda: player.health)
    attributes = KeyedFilter("attribute", lambda key: player.attributes.get(key))
    parse_formula("{health} * 0.1 + {attribute:armor}", health, attributes)
"""

from .filters import (
    Filter,
    ReplacerFilter,
    OverridableFilter,
    KeyedFilter,
    is_valid_replacement,
)
from .formula import (
    EvaluationError,
    FormulaEvaluation,
    FormulaParser,
    build_filters,
    evaluate,
    parse_formula,
)

__version__ = "0.1.0"

__all__ = [
    "Filter",
    "ReplacerFilter",
    "OverridableFilter",
    "KeyedFilter",
    "is_valid_replacement",
    "EvaluationError",
    "FormulaEvaluation",
    "FormulaParser",
    "build_filters",
    "evaluate",
    "parse_formula",
]
