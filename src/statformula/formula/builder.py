"""Build filter lists from plain data (request bodies, CLI arguments)."""

import logging
from typing import Any, Mapping, Optional, Sequence, Union

from ..filters import Filter, KeyedFilter, OverridableFilter
from .models import KeyedFilterSpec

logger = logging.getLogger(__name__)


def _constant(value: Any):
    return lambda: value


def _lookup(values: Mapping[str, Any]):
    return lambda key: values.get(key)


def build_filters(
    values: Optional[Mapping[str, Any]] = None,
    staged: Optional[Mapping[str, Any]] = None,
    keyed: Optional[Sequence[Union[KeyedFilterSpec, Mapping[str, Any]]]] = None,
) -> list[Filter]:
    """
    Build filters for a single formula evaluation.

    Args:
        values: token -> constant replacement
        staged: token -> one-shot replacement, staged on the token's filter
        keyed: keyed filter specs, e.g. token "attribute" with {"health": 100}

    Returns:
        Overridable filters (one per token, in mapping order), then keyed filters
    """
    values = dict(values or {})
    staged = dict(staged or {})
    filters: list[Filter] = []

    tokens = list(values) + [token for token in staged if token not in values]
    for token in tokens:
        placeholder_filter = OverridableFilter(token, _constant(values.get(token)))
        if token in staged:
            placeholder_filter.set_staged_replacement(staged[token])
        filters.append(placeholder_filter)

    for spec in keyed or []:
        if not isinstance(spec, KeyedFilterSpec):
            spec = KeyedFilterSpec(**spec)
        filters.append(
            KeyedFilter(
                token=spec.token,
                replacer=_lookup(spec.values),
                separator=spec.separator,
                left_wrapper=spec.left_wrapper,
                right_wrapper=spec.right_wrapper,
            )
        )

    logger.debug(f"Built {len(filters)} filters: {filters!r}")
    return filters
