"""
core/data/query - Filter queries over the inventory snapshot

Classes:
    - FilterPredicate / FilterSet / MatchMode: the filter language
    - QueryEngine: evaluates filters against the cache's current snapshot

Usage:
    from core.data.query import FilterSet, evaluate

    filters = FilterSet.from_params({"flavor": ["gpu", "cpu"], "category": "compute"})
    images = evaluate(cache.read(), "images", filters)
"""

from .datasources import (
    DataSourceResult,
    describe_kinds,
    read_available_images,
    read_available_resources,
    read_usage,
)
from .engine import QueryEngine, evaluate
from .filters import (
    FilterPredicate,
    FilterSet,
    MatchMode,
    coerce_filter_set,
    format_attribute_value,
    parse_expression,
)

__all__ = [
    # Filters
    "MatchMode",
    "FilterPredicate",
    "FilterSet",
    "coerce_filter_set",
    "format_attribute_value",
    "parse_expression",
    # Engine
    "QueryEngine",
    "evaluate",
    # Data sources
    "DataSourceResult",
    "describe_kinds",
    "read_available_images",
    "read_available_resources",
    "read_usage",
]
