"""Keyed filter: one instance serves a family of placeholders like {attribute:health}."""

import logging
import re
from typing import Optional, Pattern

from .base import Filter, Replacer
from .validity import is_valid_replacement, stringify

logger = logging.getLogger(__name__)


class KeyedFilter(Filter):
    """
    Matches ``left_wrapper + token + separator + key + right_wrapper``.

    Each match is resolved on its own by calling ``replacer(key)``. Matches
    with an empty key, or whose replacement is invalid, are left as they are.
    """

    def __init__(
        self,
        token: str = "attribute",
        replacer: Optional[Replacer] = None,
        separator: str = ":",
        left_wrapper: str = "{",
        right_wrapper: str = "}",
    ):
        super().__init__(token, replacer)
        self._separator = separator
        self._left_wrapper = left_wrapper
        self._right_wrapper = right_wrapper
        self._pattern = re.compile(
            re.escape(left_wrapper) + re.escape(token) + re.escape(separator) + "(.*?)" + re.escape(right_wrapper)
        )

    @property
    def separator(self) -> str:
        return self._separator

    @property
    def left_wrapper(self) -> str:
        return self._left_wrapper

    @property
    def right_wrapper(self) -> str:
        return self._right_wrapper

    @property
    def pattern(self) -> Pattern:
        """Compiled pattern capturing the key (non-greedy)."""
        return self._pattern

    def apply(self, template: str) -> str:
        if self.replacer is None:
            return template

        return self.pattern.sub(self._replace_match, template)

    def _replace_match(self, match: re.Match) -> str:
        key = match.group(1)
        if not key:
            return match.group(0)

        replacement = stringify(self.replacer(key))
        if not is_valid_replacement(replacement):
            logger.debug(f"No replacement for key {key!r} of {self.token!r}")
            return match.group(0)

        return replacement

    def __repr__(self) -> str:
        return (
            f"KeyedFilter(token={self.token!r}, "
            f"syntax={self.left_wrapper + self.token + self.separator + 'key' + self.right_wrapper!r})"
        )
