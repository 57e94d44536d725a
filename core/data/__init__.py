"""
core/data - Data Services Layer

Modules:
    - inventory: inventory snapshot, remote sources and the snapshot cache
    - query: filter predicates and evaluation against snapshots

Usage:
    from core.data import InventoryCache, FilterSet, evaluate
"""

from .inventory import InventoryCache, InventorySnapshot
from .query import FilterSet, QueryEngine, evaluate

__all__ = [
    # Inventory
    "InventoryCache",
    "InventorySnapshot",
    # Query
    "FilterSet",
    "QueryEngine",
    "evaluate",
]
