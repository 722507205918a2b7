"""Filter interface shared by all placeholder strategies."""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

Replacer = Callable[..., Any]


class Filter(ABC):
    """
    A unit pairing a placeholder token (or token family) with the logic
    that produces its replacement text.

    The token is fixed at construction. When no replacer is configured,
    ``apply`` returns its input unchanged.
    """

    def __init__(self, token: str, replacer: Optional[Replacer] = None):
        self._token = token
        self.replacer = replacer

    @property
    def token(self) -> str:
        """Identifier for the placeholder."""
        return self._token

    @abstractmethod
    def apply(self, template: str) -> str:
        """Replace the placeholders this filter knows about in ``template``."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(token={self._token!r})"
