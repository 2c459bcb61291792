"""
Time-expiring cache storage.

Each entity kind gets its own ``ExpiringCache`` so keys of different kinds
can never collide and each namespace can be swept independently. Entries
expire purely by age; there is no size or LRU eviction.
"""

import asyncio
import logging
import math
import time
from typing import Any, Callable, Dict, Optional

from cachetools import TTLCache

from ...config import CacheConfig, EntityKind

logger = logging.getLogger(__name__)


class ExpiringCache:
    """
    Key -> value store with per-entry timestamps and TTL staleness.

    An entry is valid iff ``now - timestamp < ttl``. Stale entries read as
    absent and stay in memory until the next ``sweep()``.

    Example:
        cache = ExpiringCache(ttl=1800.0)
        cache.set("GO:0008150", node)
        cache.get("GO:0008150")  # node, until 30 minutes have passed
    """

    def __init__(self, ttl: float, timer: Callable[[], float] = time.monotonic):
        """
        Initialize the cache.

        Args:
            ttl: Time-to-live for entries in seconds
            timer: Clock used to stamp and age entries
        """
        self.ttl = ttl
        self._cache = TTLCache(maxsize=math.inf, ttl=ttl, timer=timer)

        # Statistics
        self.hits = 0
        self.misses = 0

    def get(self, key: str, default: Any = None) -> Any:
        """Return the fresh value for ``key`` or ``default``."""
        try:
            value = self._cache[key]
        except KeyError:
            self.misses += 1
            return default
        self.hits += 1
        return value

    def set(self, key: str, value: Any) -> None:
        """Store a fresh entry, replacing any previous one."""
        self._cache[key] = value

    def __contains__(self, key: str) -> bool:
        return key in self._cache

    def sweep(self, now: Optional[float] = None) -> int:
        """
        Remove every entry whose age is at least the TTL.

        Args:
            now: Clock reading to sweep against (defaults to the cache timer)

        Returns:
            Number of entries removed
        """
        return len(self._cache.expire(now))

    def clear(self) -> None:
        self._cache.clear()
        self.hits = 0
        self.misses = 0

    def get_stats(self) -> Dict[str, Any]:
        total = self.hits + self.misses
        return {
            'hits': self.hits,
            'misses': self.misses,
            'hit_rate': self.hits / total if total > 0 else 0,
            'entries': len(self._cache),
            'ttl': self.ttl,
        }


class CacheStore:
    """
    Session-scoped owner of the three cache namespaces.

    Constructed once per browsing session and handed to the fetchers.
    Optionally runs a background task that sweeps stale entries on a fixed
    interval shorter than the TTL, so memory stays bounded across long
    sessions.
    """

    def __init__(self, config: Optional[CacheConfig] = None,
                 timer: Callable[[], float] = time.monotonic):
        self.config = config or CacheConfig()
        self._namespaces: Dict[EntityKind, ExpiringCache] = {
            kind: ExpiringCache(self.config.ttl, timer=timer) for kind in EntityKind
        }
        self._sweeper: Optional[asyncio.Task] = None

    def namespace(self, kind: EntityKind) -> ExpiringCache:
        return self._namespaces[kind]

    @property
    def nodes(self) -> ExpiringCache:
        return self._namespaces[EntityKind.NODE]

    @property
    def children(self) -> ExpiringCache:
        return self._namespaces[EntityKind.CHILDREN]

    @property
    def leaves(self) -> ExpiringCache:
        return self._namespaces[EntityKind.LEAVES]

    def sweep(self, now: Optional[float] = None) -> Dict[EntityKind, int]:
        """Sweep every namespace. Returns removed counts per kind."""
        removed = {kind: cache.sweep(now) for kind, cache in self._namespaces.items()}
        if any(removed.values()):
            logger.debug("Swept stale entries: %s",
                         {kind.key_prefix: count for kind, count in removed.items()})
        return removed

    def clear(self) -> None:
        for cache in self._namespaces.values():
            cache.clear()

    def get_stats(self) -> Dict[str, Any]:
        return {kind.key_prefix: cache.get_stats() for kind, cache in self._namespaces.items()}

    # Background sweeping

    @property
    def sweeper_running(self) -> bool:
        return self._sweeper is not None and not self._sweeper.done()

    def start_sweeper(self, interval: Optional[float] = None) -> asyncio.Task:
        """
        Start the periodic sweep task on the running event loop.

        Args:
            interval: Seconds between sweeps (defaults to config.sweep_interval)

        Returns:
            The sweeper task
        """
        if self.sweeper_running:
            return self._sweeper
        interval = self.config.sweep_interval if interval is None else interval
        self._sweeper = asyncio.ensure_future(self._sweep_forever(interval))
        return self._sweeper

    async def stop_sweeper(self) -> None:
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        try:
            await self._sweeper
        except asyncio.CancelledError:
            pass
        self._sweeper = None

    async def _sweep_forever(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            self.sweep()
