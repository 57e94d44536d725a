"""
core/data/inventory/cache.py - Snapshot-swapping inventory cache

Holds exactly one InventorySnapshot and replaces it wholesale on every
successful refresh. Readers only take the lock long enough to copy the
reference, so a refresh in flight never blocks them.
"""

from __future__ import annotations

import itertools
import logging
import threading
from datetime import datetime, timezone
from typing import Any

from core.exceptions import FetchCancelledError, FetchError, UninitializedCacheError

from .snapshot import InventorySnapshot
from .source import RemoteInventorySource

logger = logging.getLogger(__name__)


class InventoryCache:
    """Thread-safe holder of the current inventory snapshot

    Lifecycle: created empty, populated by the first successful refresh(),
    then replaced by each later successful refresh(). Reading before the first
    refresh raises UninitializedCacheError.

    Example:
        cache = InventoryCache(RestInventorySource(url, token=token))
        cache.refresh()

        snapshot = cache.read()
        images = snapshot.get("images")

        # after a mutation elsewhere
        cache.refresh()
    """

    def __init__(self, source: RemoteInventorySource):
        self._source = source
        self._lock = threading.Lock()
        self._tickets = itertools.count(1)
        self._snapshot: InventorySnapshot | None = None
        self._stale = False
        self._last_error: FetchError | None = None
        self._last_refreshed_at: datetime | None = None
        self._refreshes = 0
        self._failures = 0
        self._discarded = 0

    @property
    def source(self) -> RemoteInventorySource:
        return self._source

    def refresh(self, cancel: threading.Event | None = None) -> InventorySnapshot:
        """Fetch the inventory and install it as the current snapshot

        The fetch runs outside the lock. On failure the current snapshot is
        left untouched, the cache is flagged stale and the error is re-raised;
        no retry happens here.

        Args:
            cancel: set by the caller to abandon the refresh

        Returns:
            The snapshot that is current after the call

        Raises:
            FetchError: the source failed, or FetchCancelledError if cancelled
        """
        with self._lock:
            ticket = next(self._tickets)

        try:
            payload = self._source.fetch(cancel=cancel)
            snapshot = InventorySnapshot.from_payload(payload, generation=ticket)
            if cancel is not None and cancel.is_set():
                raise FetchCancelledError()
        except FetchError as e:
            with self._lock:
                self._failures += 1
                if self._snapshot is None or ticket > self._snapshot.generation:
                    self._stale = True
                self._last_error = e
            logger.warning("inventory refresh #%d failed: %s", ticket, e)
            raise

        with self._lock:
            current = self._snapshot
            if current is not None and current.generation > ticket:
                # a refresh started later already installed its result
                self._discarded += 1
                logger.debug(
                    "discarding inventory refresh #%d, #%d is newer",
                    ticket,
                    current.generation,
                )
                return current

            self._snapshot = snapshot
            self._stale = False
            self._last_error = None
            self._last_refreshed_at = datetime.now(timezone.utc)
            self._refreshes += 1

        logger.info("inventory refreshed (#%d): %s", ticket, snapshot.counts())
        return snapshot

    def read(self) -> InventorySnapshot:
        """Return the current snapshot

        Raises:
            UninitializedCacheError: no refresh has succeeded yet
        """
        with self._lock:
            snapshot = self._snapshot
        if snapshot is None:
            raise UninitializedCacheError()
        return snapshot

    @property
    def is_populated(self) -> bool:
        with self._lock:
            return self._snapshot is not None

    @property
    def is_stale(self) -> bool:
        """True when the most recent refresh failed"""
        with self._lock:
            return self._stale

    @property
    def generation(self) -> int:
        """Ticket of the installed snapshot (0 when unpopulated)"""
        with self._lock:
            return self._snapshot.generation if self._snapshot is not None else 0

    @property
    def last_error(self) -> FetchError | None:
        with self._lock:
            return self._last_error

    @property
    def stats(self) -> dict[str, Any]:
        """Get cache statistics"""
        with self._lock:
            snapshot = self._snapshot
            return {
                "populated": snapshot is not None,
                "stale": self._stale,
                "generation": snapshot.generation if snapshot is not None else 0,
                "refreshes": self._refreshes,
                "failures": self._failures,
                "discarded": self._discarded,
                "last_refreshed_at": self._last_refreshed_at,
                "counts": snapshot.counts() if snapshot is not None else {},
            }

    def __repr__(self) -> str:
        stats = self.stats
        return (
            f"InventoryCache(populated={stats['populated']}, "
            f"generation={stats['generation']}, "
            f"stale={stats['stale']}, "
            f"refreshes={stats['refreshes']})"
        )
