"""
core/data/inventory/snapshot.py - Immutable inventory snapshot

An InventorySnapshot is the materialized view of exactly one response of the
remote inventory source. It is never merged with another response and never
mutated after construction.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any

from core.exceptions import FetchError

from .types import RESOURCE_KINDS, ResourceDescriptor, get_descriptor_class

logger = logging.getLogger(__name__)

_PAYLOAD_KEYS = {cls.PAYLOAD_KEY: kind for kind, cls in RESOURCE_KINDS.items()}


@dataclass(frozen=True)
class InventorySnapshot:
    """Per-kind ordered descriptors from one remote fetch

    Equality compares descriptor contents only, so two refreshes over
    identical remote data produce equal snapshots.

    Example:
        snapshot = InventorySnapshot.from_payload({"images": [...]})
        for image in snapshot.get("images"):
            print(image.flavor)
    """

    entries: Mapping[str, tuple[ResourceDescriptor, ...]]
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc), compare=False)
    generation: int = field(default=0, compare=False)

    def __post_init__(self):
        # every registered kind is present, possibly empty
        complete = {kind: tuple(self.entries.get(kind, ())) for kind in RESOURCE_KINDS}
        object.__setattr__(self, "entries", MappingProxyType(complete))

    @classmethod
    def from_payload(cls, payload: Any, generation: int = 0) -> InventorySnapshot:
        """Decode a remote payload into a snapshot

        Args:
            payload: mapping of payload key to list of records
            generation: refresh ticket that produced the payload

        Raises:
            FetchError: the payload does not have the expected shape
        """
        if not isinstance(payload, Mapping):
            raise FetchError(
                f"inventory payload must be an object, got {type(payload).__name__}",
                reason=FetchError.DECODING,
            )

        entries: dict[str, tuple[ResourceDescriptor, ...]] = {}
        for key, records in payload.items():
            kind = _PAYLOAD_KEYS.get(key)
            if kind is None:
                logger.debug("ignoring unknown inventory payload key %s", key)
                continue
            if records is None:
                continue
            if not isinstance(records, list):
                raise FetchError(
                    f"inventory payload key '{key}' must be a list",
                    reason=FetchError.DECODING,
                )
            descriptor_cls = RESOURCE_KINDS[kind]
            entries[kind] = tuple(descriptor_cls.from_payload(record) for record in records)

        return cls(entries=entries, generation=generation)

    def get(self, kind: str) -> tuple[ResourceDescriptor, ...]:
        """Descriptors of one kind in remote order

        Raises:
            UnknownResourceKindError: the kind is not registered
        """
        get_descriptor_class(kind)
        return self.entries[kind]

    def kinds(self) -> list[str]:
        return list(self.entries)

    def counts(self) -> dict[str, int]:
        return {kind: len(items) for kind, items in self.entries.items()}

    def __len__(self) -> int:
        return sum(len(items) for items in self.entries.values())

    def __repr__(self) -> str:
        return (
            f"InventorySnapshot(generation={self.generation}, "
            f"descriptors={len(self)}, fetched_at={self.fetched_at.isoformat()})"
        )
