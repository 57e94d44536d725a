"""
core/data/inventory - Resource inventory snapshot and cache

Holds the process-wide view of everything the provisioning API reports as
available. The cache is refreshed explicitly (at configuration time and after
mutations) and read concurrently by queries.

Classes:
    - InventoryCache: thread-safe holder of the current snapshot
    - InventorySnapshot: immutable per-kind descriptors from one fetch
    - RestInventorySource / FileInventorySource / StaticInventorySource

Usage:
    from core.data.inventory import InventoryCache, RestInventorySource

    cache = InventoryCache(RestInventorySource(rest_url, token=token))
    cache.refresh()
    images = cache.read().get("images")
"""

from .cache import InventoryCache
from .snapshot import InventorySnapshot
from .source import (
    FileInventorySource,
    RemoteInventorySource,
    RestInventorySource,
    StaticInventorySource,
)
from .types import (
    RESOURCE_KINDS,
    Image,
    Location,
    MachineSize,
    Network,
    ResourceDescriptor,
    SSHKey,
    UsageRecord,
    VolumeFlavor,
    get_descriptor_class,
)

__all__ = [
    # Cache
    "InventoryCache",
    "InventorySnapshot",
    # Sources
    "RemoteInventorySource",
    "RestInventorySource",
    "FileInventorySource",
    "StaticInventorySource",
    # Types
    "RESOURCE_KINDS",
    "ResourceDescriptor",
    "Image",
    "MachineSize",
    "Location",
    "SSHKey",
    "VolumeFlavor",
    "Network",
    "UsageRecord",
    "get_descriptor_class",
]
