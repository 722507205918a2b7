"""Literal-token filters: plain replacer and one-shot overridable."""

import logging
from typing import Any, Optional

from .base import Filter, Replacer
from .validity import is_valid_replacement, stringify

logger = logging.getLogger(__name__)


class ReplacerFilter(Filter):
    """Replaces every occurrence of ``token`` with a fresh value from ``replacer()``."""

    def __init__(self, token: str = "{placeholder}", replacer: Optional[Replacer] = None):
        super().__init__(token, replacer)

    def apply(self, template: str) -> str:
        if self.replacer is None:
            return template

        return self._substitute(template, stringify(self.replacer()))

    def _substitute(self, template: str, replacement: Optional[str]) -> str:
        """Replace every literal occurrence of the token, unless the replacement is invalid."""
        if not is_valid_replacement(replacement):
            logger.debug(f"Rejected replacement {replacement!r} for {self.token!r}")
            return template

        return template.replace(self.token, replacement)


class OverridableFilter(ReplacerFilter):
    """
    A replacer filter that also accepts a manually staged replacement.

    A staged value takes priority over the replacer and is consumed by the
    next ``apply`` call; later calls fall back to the replacer again. Staging
    and applying must happen in the same logical caller: instances are not
    safe to share between concurrent users.
    """

    def __init__(self, token: str = "{placeholder}", replacer: Optional[Replacer] = None):
        super().__init__(token, replacer)
        self._staged = ""

    def has_staged_replacement(self) -> bool:
        """Whether a non-empty replacement is staged."""
        return bool(self._staged)

    def set_staged_replacement(self, value: Any) -> "OverridableFilter":
        """
        Stage a replacement for the next application only.

        Args:
            value: Replacement for the placeholder (converted with ``str``)

        Returns:
            self, for chaining
        """
        self._staged = str(value)
        return self

    def fetch_staged_replacement(self) -> str:
        """Return the staged replacement and clear it."""
        staged = self._staged
        self._staged = ""
        return staged

    def apply(self, template: str) -> str:
        if self.replacer is None:
            return template

        if self.has_staged_replacement():
            replacement = self.fetch_staged_replacement()
        else:
            replacement = stringify(self.replacer())

        return self._substitute(template, replacement)
