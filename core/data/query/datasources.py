"""
core/data/query/datasources.py - Read-only inventory data sources

Query-layer entry points: each reads the current snapshot of a
ProviderContext, evaluates the caller's filters and returns plain rows.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from core.data.inventory.types import RESOURCE_KINDS
from core.exceptions import InvalidFilterError

from .engine import evaluate
from .filters import coerce_filter_set

if TYPE_CHECKING:
    from core.provider import ProviderContext

AVAILABLE_RESOURCES_ID = "available_resources"


@dataclass
class DataSourceResult:
    """Rows produced by one data source read"""

    id: str
    kind: str | None
    items: list[dict[str, Any]] = field(default_factory=list)
    # kind -> rows, filled when every kind is read at once
    by_kind: dict[str, list[dict[str, Any]]] = field(default_factory=dict)

    def __len__(self) -> int:
        if self.by_kind:
            return sum(len(rows) for rows in self.by_kind.values())
        return len(self.items)


def describe_kinds() -> dict[str, tuple[str, ...]]:
    """Filterable attribute names per kind"""
    return {kind: cls.attribute_names() for kind, cls in RESOURCE_KINDS.items()}


def _read_kind(ctx: ProviderContext, kind: str, filters: Any, result_id: str) -> DataSourceResult:
    filter_set = coerce_filter_set(filters)
    matched = evaluate(ctx.snapshot(), kind, filter_set)
    return DataSourceResult(id=result_id, kind=kind, items=[d.attributes() for d in matched])


def read_available_images(ctx: ProviderContext, filters: Any = None) -> DataSourceResult:
    """Images matching ``filters`` (flavor, category, version, id)"""
    return _read_kind(ctx, "images", filters, "images")


def read_usage(ctx: ProviderContext, filters: Any = None) -> DataSourceResult:
    return _read_kind(ctx, "usage", filters, "usage")


def read_available_resources(
    ctx: ProviderContext,
    kind: str | None = None,
    filters: Any = None,
) -> DataSourceResult:
    """Rows of one kind, or every kind unfiltered when ``kind`` is None

    Raises:
        InvalidFilterError: filters were given without a kind
    """
    if kind is not None:
        return _read_kind(ctx, kind, filters, kind)

    filter_set = coerce_filter_set(filters)
    if not filter_set.is_empty:
        raise InvalidFilterError(filter_set.names()[0], "filters require a resource kind")

    snapshot = ctx.snapshot()
    by_kind = {kind_name: [d.attributes() for d in snapshot.get(kind_name)] for kind_name in snapshot.kinds()}
    return DataSourceResult(id=AVAILABLE_RESOURCES_ID, kind=None, by_kind=by_kind)
