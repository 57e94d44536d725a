"""
core/data/inventory/types.py - Resource descriptors for the inventory

One frozen dataclass per resource kind reported by the remote
``available-resources`` endpoint. Descriptors are never patched: a refresh
replaces every one of them.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import MISSING, dataclass, fields
from typing import Any, ClassVar

from core.exceptions import FetchError, UnknownResourceKindError


@dataclass(frozen=True)
class ResourceDescriptor:
    """Base class for every inventory descriptor

    Subclasses declare their attributes as dataclass fields. ``id`` is always
    the first one; every field is a legal filter name for the kind.
    """

    KIND: ClassVar[str] = ""
    PAYLOAD_KEY: ClassVar[str] = ""
    # attribute name -> payload field name, for fields that differ
    PAYLOAD_FIELDS: ClassVar[dict[str, str]] = {}

    id: str

    @classmethod
    def attribute_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def attributes(self) -> dict[str, Any]:
        """Ordered mapping of attribute name to value"""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_payload(cls, record: Any) -> ResourceDescriptor:
        """Build a descriptor from one remote record

        Raises:
            FetchError: the record is not a mapping, has no id, or carries a
                value that cannot be coerced to the attribute's type
        """
        if not isinstance(record, Mapping):
            raise FetchError(
                f"{cls.KIND} record must be an object, got {type(record).__name__}",
                reason=FetchError.DECODING,
            )

        values: dict[str, Any] = {}
        for f in fields(cls):
            key = cls.PAYLOAD_FIELDS.get(f.name, f.name)
            raw = record.get(key)
            if f.name == "id":
                if raw is None or str(raw) == "":
                    raise FetchError(f"{cls.KIND} record without id", reason=FetchError.DECODING)
                values["id"] = str(raw)
                continue
            if raw is None:
                continue
            values[f.name] = _coerce(cls.KIND, f.name, raw, f.default)

        return cls(**values)


def _coerce(kind: str, name: str, raw: Any, default: Any) -> Any:
    """Coerce a payload value to the type of the field default"""
    if default is MISSING or isinstance(default, str):
        return str(raw)
    try:
        if isinstance(raw, bool):
            raise TypeError("boolean is not numeric")
        if isinstance(default, int) and isinstance(raw, float) and not raw.is_integer():
            raise ValueError("fractional value for an integer attribute")
        return type(default)(raw)
    except (TypeError, ValueError) as e:
        raise FetchError(
            f"{kind}.{name} has invalid value {raw!r}",
            reason=FetchError.DECODING,
            cause=e,
        ) from e


@dataclass(frozen=True)
class Image(ResourceDescriptor):
    """OS image variant available for hosts"""

    KIND: ClassVar[str] = "images"
    PAYLOAD_KEY: ClassVar[str] = "images"
    PAYLOAD_FIELDS: ClassVar[dict[str, str]] = {}

    flavor: str = ""
    category: str = ""
    version: str = ""


@dataclass(frozen=True)
class MachineSize(ResourceDescriptor):
    """Host class that can be provisioned at a location"""

    KIND: ClassVar[str] = "machine_sizes"
    PAYLOAD_KEY: ClassVar[str] = "machineSizes"
    PAYLOAD_FIELDS: ClassVar[dict[str, str]] = {"location_id": "locationID"}

    name: str = ""
    location_id: str = ""
    details: str = ""


@dataclass(frozen=True)
class Location(ResourceDescriptor):
    KIND: ClassVar[str] = "locations"
    PAYLOAD_KEY: ClassVar[str] = "locations"
    PAYLOAD_FIELDS: ClassVar[dict[str, str]] = {"data_center": "dataCenter"}

    country: str = ""
    region: str = ""
    data_center: str = ""


@dataclass(frozen=True)
class SSHKey(ResourceDescriptor):
    KIND: ClassVar[str] = "ssh_keys"
    PAYLOAD_KEY: ClassVar[str] = "sshKeys"
    PAYLOAD_FIELDS: ClassVar[dict[str, str]] = {"public_key": "key"}

    name: str = ""
    public_key: str = ""


@dataclass(frozen=True)
class VolumeFlavor(ResourceDescriptor):
    KIND: ClassVar[str] = "volume_flavors"
    PAYLOAD_KEY: ClassVar[str] = "volumeFlavors"
    PAYLOAD_FIELDS: ClassVar[dict[str, str]] = {}

    name: str = ""
    description: str = ""


@dataclass(frozen=True)
class Network(ResourceDescriptor):
    """Project network a host can attach to"""

    KIND: ClassVar[str] = "networks"
    PAYLOAD_KEY: ClassVar[str] = "networks"
    PAYLOAD_FIELDS: ClassVar[dict[str, str]] = {
        "location_id": "locationID",
        "host_use": "hostUse",
    }

    name: str = ""
    location_id: str = ""
    host_use: str = ""


@dataclass(frozen=True)
class UsageRecord(ResourceDescriptor):
    """Consumption of one resource type against the project limit"""

    KIND: ClassVar[str] = "usage"
    PAYLOAD_KEY: ClassVar[str] = "usage"
    PAYLOAD_FIELDS: ClassVar[dict[str, str]] = {
        "resource_type": "resourceType",
        "location_id": "locationID",
    }

    resource_type: str = ""
    location_id: str = ""
    used: int = 0
    limit: float = 0.0


RESOURCE_KINDS: dict[str, type[ResourceDescriptor]] = {
    cls.KIND: cls
    for cls in (Image, MachineSize, Location, SSHKey, VolumeFlavor, Network, UsageRecord)
}


def get_descriptor_class(kind: str) -> type[ResourceDescriptor]:
    """Return the descriptor class registered for a kind

    Raises:
        UnknownResourceKindError: the kind is not part of the inventory
    """
    try:
        return RESOURCE_KINDS[kind]
    except KeyError:
        raise UnknownResourceKindError(kind, known=sorted(RESOURCE_KINDS)) from None
