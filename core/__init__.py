# core/__init__.py
"""
core - Inventory cache and filter-query engine

Top-level package of quake-inventory. Holds the process-wide snapshot of the
resources the provisioning API reports as available, and the filter language
used to query it.

Architecture:
    core/
    ├── data/
    │   ├── inventory/  # descriptors, snapshot, sources, InventoryCache
    │   └── query/      # FilterPredicate/FilterSet, evaluate, data sources
    ├── provider.py     # ProviderContext (owns the cache), mutation hook
    ├── config.py       # central configuration
    └── exceptions.py   # unified exception hierarchy

Usage:
    from core.config import ProviderConfig
    from core.provider import ProviderContext

    ctx = ProviderContext.configure(ProviderConfig.from_env())
    gpu_images = ctx.query("images", ["flavor=gpu"])

    # after a mutation elsewhere
    ctx.refresh_after_mutation("create ssh_key")
"""

from core import config, exceptions

__all__: list[str] = [
    "config",
    "exceptions",
]
