"""
In-memory handle on the persisted cache store.

The store is loaded on first use, kept in memory while it is being accessed
and dropped again once it has been idle for a while:

    EMPTY --load()--> LOADED --touch()--> EVICTING --timer--> EMPTY
                                              |
                                           load()
                                              v
                                           LOADED

When the eviction fires is decided by a pluggable policy. Disposing the
handle cancels any pending timer and prevents new ones.
"""

import asyncio
import logging
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Protocol

from incbundler.constants import DEFAULT_IDLE_EVICTION_DELAY
from incbundler.io.store import StoreMap, load_map, save_map

logger = logging.getLogger(__name__)


class StoreState(str, Enum):
    EMPTY = "empty"
    LOADED = "loaded"
    EVICTING = "evicting"


class Cancelable(Protocol):
    def cancel(self) -> None: ...


class EvictionPolicy(Protocol):
    """Decides when an idle store is dropped from memory."""

    def arm(self, evict: Callable[[], None]) -> Optional[Cancelable]:
        """Schedule ``evict``. Returns a handle to cancel it, or None."""
        ...


class IdleEviction:
    """Evict after ``delay`` seconds without access, on the running loop."""

    def __init__(self, delay: float = DEFAULT_IDLE_EVICTION_DELAY):
        if delay < 0:
            raise ValueError("Eviction delay must not be negative")
        self.delay = delay

    def arm(self, evict: Callable[[], None]) -> Optional[Cancelable]:
        loop = asyncio.get_running_loop()
        return loop.call_later(self.delay, evict)


class NoEviction:
    """Keep the store in memory until it is explicitly evicted."""

    def arm(self, evict: Callable[[], None]) -> Optional[Cancelable]:
        return None


class StoreHandle:
    """Lazily loaded, idle-evicted view of the store file."""

    def __init__(self, path: Path, policy: Optional[EvictionPolicy] = None):
        self.path = Path(path)
        self.policy = policy if policy is not None else IdleEviction()
        self.state = StoreState.EMPTY
        self._records: Optional[StoreMap] = None
        self._timer: Optional[Cancelable] = None
        self._disposed = False
        self._save_lock: Optional[asyncio.Lock] = None
        self._save_loop: Optional[asyncio.AbstractEventLoop] = None
        self._pending: Optional[StoreMap] = None
        self._generation = 0
        self._written_generation = 0

    @property
    def loaded(self) -> bool:
        return self._records is not None

    async def load(self) -> StoreMap:
        """Return the live mapping, reading it from disk if needed."""
        if self._disposed:
            raise RuntimeError("Store handle has been disposed")

        self._cancel_timer()
        if self._records is None:
            records = await asyncio.to_thread(load_map, self.path)
            # a concurrent load may have finished first
            if self._records is None:
                self._records = records
                logger.debug(f"Store loaded from {self.path}")
        self.state = StoreState.LOADED
        return self._records

    async def save(self, records: StoreMap) -> None:
        """
        Write the whole mapping back to disk.

        Writes run one at a time and each writes the newest snapshot handed
        to ``save`` so far, so an older snapshot never replaces a newer one.
        A save whose snapshot was already superseded on disk does nothing.
        """
        self._generation += 1
        self._pending = dict(records)
        loop = asyncio.get_running_loop()
        if self._save_lock is None or self._save_loop is not loop:
            # asyncio locks are bound to the loop they first wait on
            self._save_lock, self._save_loop = asyncio.Lock(), loop

        async with self._save_lock:
            if self._written_generation >= self._generation:
                return
            generation, snapshot = self._generation, self._pending
            await asyncio.to_thread(save_map, self.path, snapshot)
            self._written_generation = generation

    def touch(self) -> None:
        """(Re)arm idle eviction after an access."""
        if self._disposed or self._records is None:
            return
        self._cancel_timer()
        self._timer = self.policy.arm(self._on_idle)
        self.state = StoreState.EVICTING

    def evict(self) -> None:
        """Drop the in-memory mapping. The file on disk is untouched."""
        self._cancel_timer()
        self._records = None
        self.state = StoreState.EMPTY

    def dispose(self) -> None:
        self.evict()
        self._disposed = True

    def _on_idle(self) -> None:
        self._timer = None
        if self._disposed:
            return
        logger.debug(f"Store {self.path} idle, evicting from memory")
        self.evict()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
