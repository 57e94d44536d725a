"""
core/data/query/engine.py - Filter evaluation against inventory snapshots

Validation happens before any matching: an unknown kind or an unknown filter
attribute fails the whole query, never yielding a partial result.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .filters import FilterSet, coerce_filter_set

if TYPE_CHECKING:
    from core.data.inventory.cache import InventoryCache
    from core.data.inventory.snapshot import InventorySnapshot
    from core.data.inventory.types import ResourceDescriptor

logger = logging.getLogger(__name__)


def evaluate(
    snapshot: InventorySnapshot,
    kind: str,
    filter_set: FilterSet | None = None,
) -> list[ResourceDescriptor]:
    """Descriptors of ``kind`` matching ``filter_set``, in snapshot order

    Args:
        snapshot: snapshot borrowed from the cache for this query
        kind: resource kind (e.g. "images")
        filter_set: predicates to apply (None or empty matches everything)

    Raises:
        UnknownResourceKindError: the kind is not registered
        InvalidFilterError: a predicate names an attribute the kind lacks
    """
    filter_set = filter_set or FilterSet()
    descriptors = snapshot.get(kind)
    filter_set.validate(kind)

    matched = [d for d in descriptors if filter_set.matches(d)]
    logger.debug("%s [%s]: %d of %d matched", kind, filter_set, len(matched), len(descriptors))
    return matched


class QueryEngine:
    """Runs filter queries against the current snapshot of a cache

    Example:
        engine = QueryEngine(cache)
        gpu_images = engine.query("images", ["flavor=gpu"])
    """

    def __init__(self, cache: InventoryCache):
        self._cache = cache

    def query(self, kind: str, filters: Any = None) -> list[ResourceDescriptor]:
        """Read the current snapshot and evaluate ``filters`` against it

        ``filters`` accepts whatever coerce_filter_set does.

        Raises:
            UninitializedCacheError: the cache was never refreshed
        """
        filter_set = coerce_filter_set(filters)
        return evaluate(self._cache.read(), kind, filter_set)
