"""
core/provider.py - Provider session context

ProviderContext owns the InventoryCache for one provider configuration and
is passed explicitly to every query and mutation. Configuration performs the
mandatory first refresh; a failure there aborts configuration.

Usage:
    from core.provider import ProviderContext, invalidates_inventory

    ctx = ProviderContext.configure(ProviderConfig.from_env())
    images = ctx.query("images", {"flavor": ["gpu"]})

    @invalidates_inventory("create ssh_key")
    def create_ssh_key(ctx, name, public_key):
        return client.add_ssh_key(name, public_key)
"""

from __future__ import annotations

import functools
import logging
import threading
from collections.abc import Callable
from typing import Any, TypeVar

from core.config import ProviderConfig
from core.data.inventory import (
    FileInventorySource,
    InventoryCache,
    InventorySnapshot,
    RemoteInventorySource,
    RestInventorySource,
)
from core.data.query.engine import QueryEngine
from core.exceptions import FetchError

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def build_source(config: ProviderConfig) -> RemoteInventorySource:
    """Create the inventory source described by the configuration"""
    config.validate()
    if config.inventory_file:
        return FileInventorySource(config.inventory_file)
    return RestInventorySource(
        config.resolved_rest_url(),
        token=config.token or None,
        project_id=config.project_id or None,
        timeout=config.timeout,
    )


class ProviderContext:
    """Configuration/session context carrying the inventory cache"""

    def __init__(self, config: ProviderConfig, cache: InventoryCache):
        self._config = config
        self._cache = cache
        self._engine = QueryEngine(cache)

    @classmethod
    def configure(
        cls,
        config: ProviderConfig,
        source: RemoteInventorySource | None = None,
        cancel: threading.Event | None = None,
    ) -> ProviderContext:
        """Build the context and populate its cache

        Raises:
            ConfigError: the configuration names no inventory endpoint
            FetchError: the initial refresh failed; no context is returned
        """
        cache = InventoryCache(source or build_source(config))
        try:
            cache.refresh(cancel=cancel)
        except FetchError as e:
            logger.error("provider configuration aborted: %s", e)
            raise
        return cls(config, cache)

    @property
    def config(self) -> ProviderConfig:
        return self._config

    @property
    def cache(self) -> InventoryCache:
        return self._cache

    @property
    def engine(self) -> QueryEngine:
        return self._engine

    def snapshot(self) -> InventorySnapshot:
        return self._cache.read()

    def query(self, kind: str, filters: Any = None) -> list:
        return self._engine.query(kind, filters)

    def refresh_after_mutation(
        self,
        operation: str,
        cancel: threading.Event | None = None,
    ) -> InventorySnapshot:
        """Refresh the inventory after a mutation succeeded remotely

        The mutation is not undone when the refresh fails; the error is
        logged and re-raised, and the cache stays flagged stale until the
        next successful refresh.
        """
        try:
            return self._cache.refresh(cancel=cancel)
        except FetchError as e:
            e.details["operation"] = operation
            logger.warning("inventory is stale after %s: %s", operation, e)
            raise

    def __repr__(self) -> str:
        return f"ProviderContext(project={self._config.project_id!r}, cache={self._cache!r})"


def invalidates_inventory(operation: str) -> Callable[[F], F]:
    """Refresh the inventory after the decorated mutation returns

    The decorated function takes the ProviderContext as its first argument.
    Exceptions raised by the mutation propagate without a refresh.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(ctx: ProviderContext, *args: Any, **kwargs: Any) -> Any:
            result = func(ctx, *args, **kwargs)
            ctx.refresh_after_mutation(operation)
            return result

        return wrapper  # type: ignore[return-value]

    return decorator
