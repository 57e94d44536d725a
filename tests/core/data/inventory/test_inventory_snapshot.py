"""
tests/core/data/inventory/test_inventory_snapshot.py - InventorySnapshot tests
"""

import pytest

from core.data.inventory import Image, InventorySnapshot
from core.exceptions import FetchError, UnknownResourceKindError


class TestFromPayload:
    """payload decoding"""

    def test_decodes_every_kind(self, sample_payload):
        snapshot = InventorySnapshot.from_payload(sample_payload)

        assert snapshot.counts() == {
            "images": 4,
            "machine_sizes": 2,
            "locations": 2,
            "ssh_keys": 1,
            "volume_flavors": 1,
            "networks": 1,
            "usage": 2,
        }
        assert len(snapshot) == 13

    def test_preserves_remote_order(self, sample_payload):
        snapshot = InventorySnapshot.from_payload(sample_payload)

        assert [image.id for image in snapshot.get("images")] == ["i1", "i2", "i3", "i4"]

    def test_missing_kinds_are_empty(self):
        snapshot = InventorySnapshot.from_payload({"images": [{"id": "i1"}]})

        assert snapshot.get("networks") == ()
        assert snapshot.get("images") == (Image(id="i1"),)

    def test_null_kind_is_empty(self):
        snapshot = InventorySnapshot.from_payload({"images": None})

        assert snapshot.get("images") == ()

    def test_unknown_payload_keys_ignored(self):
        snapshot = InventorySnapshot.from_payload({"images": [], "storageSystems": [{"id": "s1"}]})

        assert len(snapshot) == 0
        assert "storageSystems" not in snapshot.kinds()

    def test_generation_recorded(self):
        snapshot = InventorySnapshot.from_payload({}, generation=7)

        assert snapshot.generation == 7

    def test_payload_not_mapping(self):
        with pytest.raises(FetchError) as exc_info:
            InventorySnapshot.from_payload([{"id": "i1"}])

        assert exc_info.value.reason == FetchError.DECODING

    def test_kind_not_list(self):
        with pytest.raises(FetchError) as exc_info:
            InventorySnapshot.from_payload({"images": {"id": "i1"}})

        assert "images" in str(exc_info.value)

    def test_bad_record_fails_whole_payload(self):
        """no partially decoded snapshot"""
        with pytest.raises(FetchError):
            InventorySnapshot.from_payload({"images": [{"id": "i1"}, {"flavor": "gpu"}]})


class TestAccess:
    """read access"""

    def test_unknown_kind(self, sample_payload):
        snapshot = InventorySnapshot.from_payload(sample_payload)

        with pytest.raises(UnknownResourceKindError):
            snapshot.get("region")

    def test_entries_read_only(self, sample_payload):
        snapshot = InventorySnapshot.from_payload(sample_payload)

        with pytest.raises(TypeError):
            snapshot.entries["images"] = ()

    def test_kinds_lists_every_registered_kind(self):
        snapshot = InventorySnapshot.from_payload({})

        assert "images" in snapshot.kinds()
        assert "usage" in snapshot.kinds()


class TestEquality:
    """equality compares descriptor contents only"""

    def test_same_payload_equal(self, sample_payload):
        first = InventorySnapshot.from_payload(sample_payload, generation=1)
        second = InventorySnapshot.from_payload(sample_payload, generation=2)

        assert first == second
        assert first is not second

    def test_different_payload_not_equal(self, sample_payload):
        first = InventorySnapshot.from_payload(sample_payload)
        second = InventorySnapshot.from_payload({"images": [{"id": "i9"}]})

        assert first != second

    def test_repr(self):
        snapshot = InventorySnapshot.from_payload({"images": [{"id": "i1"}]}, generation=3)

        assert "generation=3" in repr(snapshot)
        assert "descriptors=1" in repr(snapshot)
