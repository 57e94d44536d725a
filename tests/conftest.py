"""
tests/conftest.py - shared pytest fixtures

Inventory payloads, sources, caches and provider contexts used across the
test suite.

Usage:
    def test_something(populated_cache, provider_context):
        snapshot = populated_cache.read()
"""

import json
import sys
from pathlib import Path

import pytest

# put the project root on sys.path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from core.config import ProviderConfig  # noqa: E402
from core.data.inventory import InventoryCache, StaticInventorySource  # noqa: E402
from core.provider import ProviderContext  # noqa: E402

# =============================================================================
# Payloads
# =============================================================================


def make_payload(images=None, **kinds):
    """Build an available-resources payload (camelCase keys as on the wire)"""
    payload = {
        "images": images
        if images is not None
        else [
            {"id": "i1", "flavor": "gpu", "category": "compute", "version": "1.0"},
            {"id": "i2", "flavor": "cpu", "category": "compute", "version": "1.0"},
        ],
    }
    payload.update(kinds)
    return payload


@pytest.fixture
def sample_payload():
    """Four images plus descriptors of every other kind (13 in total)"""
    return make_payload(
        images=[
            {"id": "i1", "flavor": "gpu", "category": "compute", "version": "1.0"},
            {"id": "i2", "flavor": "cpu", "category": "compute", "version": "1.0"},
            {"id": "i3", "flavor": "gpu", "category": "storage", "version": "2.0"},
            {"id": "i4", "flavor": "cpu", "category": "storage", "version": "2.1"},
        ],
        machineSizes=[
            {"id": "ms1", "name": "m2.small", "locationID": "loc-1", "details": "2 cores"},
            {"id": "ms2", "name": "m2.large", "locationID": "loc-2", "details": "16 cores"},
        ],
        locations=[
            {"id": "loc-1", "country": "USA", "region": "Central", "dataCenter": "AUS"},
            {"id": "loc-2", "country": "France", "region": "West", "dataCenter": "PAR"},
        ],
        sshKeys=[{"id": "k1", "name": "ops", "key": "ssh-ed25519 AAAA ops"}],
        volumeFlavors=[{"id": "vf1", "name": "fast", "description": "NVMe"}],
        networks=[{"id": "n1", "name": "public", "locationID": "loc-1", "hostUse": "Required"}],
        usage=[
            {"id": "u1", "resourceType": "hosts", "locationID": "loc-1", "used": 3, "limit": 10},
            {"id": "u2", "resourceType": "volume_capacity", "locationID": "loc-1", "used": 100, "limit": 2048.5},
        ],
    )


# =============================================================================
# Sources and caches
# =============================================================================


@pytest.fixture
def static_source(sample_payload):
    return StaticInventorySource(sample_payload)


@pytest.fixture
def populated_cache(static_source):
    """Cache after one successful refresh"""
    cache = InventoryCache(static_source)
    cache.refresh()
    return cache


@pytest.fixture
def provider_context(static_source):
    """ProviderContext configured over the static source"""
    config = ProviderConfig(inventory_file="unused.json", project_id="p-test")
    return ProviderContext.configure(config, source=static_source)


@pytest.fixture
def inventory_file(tmp_path, sample_payload):
    """sample_payload written as JSON"""
    path = tmp_path / "inventory.json"
    path.write_text(json.dumps(sample_payload), encoding="utf-8")
    return path


class FailingSource:
    """Source that always raises the given FetchError"""

    def __init__(self, error):
        self.error = error
        self.calls = 0

    def fetch(self, cancel=None):
        self.calls += 1
        raise self.error


@pytest.fixture
def failing_source_factory():
    return FailingSource
