"""Placeholder filters.

Each filter knows one placeholder token (or token family) and how to produce
its replacement text. Filters are applied to a template string with
``apply`` and return the substituted string.
"""

from .base import Filter, Replacer
from .replacer import ReplacerFilter, OverridableFilter
from .keyed import KeyedFilter
from .validity import is_valid_replacement, stringify

__all__ = [
    "Filter",
    "Replacer",
    "ReplacerFilter",
    "OverridableFilter",
    "KeyedFilter",
    "is_valid_replacement",
    "stringify",
]
