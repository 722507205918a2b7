"""Checks for replacement text produced by filters."""

from typing import Any, Optional

# Stringified absent values that must never leak into a template
INVALID_LITERALS = frozenset({"undefined", "null", "None"})


def is_valid_replacement(candidate: Any) -> bool:
    """
    Check whether a candidate replacement string is usable.

    Args:
        candidate: May be a valid string, or not a string at all

    Returns:
        False if candidate is not a string, is empty, or is a stringified
        absent value ("undefined", "null", "None"); True otherwise
    """
    if not isinstance(candidate, str) or not candidate:
        return False
    return candidate not in INVALID_LITERALS


def stringify(value: Any) -> Optional[str]:
    """Convert a replacer result to replacement text (None stays None)."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
