"""
Predictive prefetching.

Best-effort, non-blocking readahead that warms the cache ahead of likely
user actions:

- hovering a node prefetches its leaves,
- expanding a narrow node reads its grandchildren lists after a short
  debounce,
- loading the root set preloads every root's children after a longer delay.

Background work is fire-and-forget: it populates the cache on success,
is dropped on failure, and never retries.
"""

import asyncio
import logging
from typing import Coroutine, Iterable, List, Optional, Set

from ..config import EntityKind, PrefetchConfig
from .core.node import OntologyNode
from .fetcher import EntityFetcher

logger = logging.getLogger(__name__)


class PrefetchScheduler:
    """
    Schedules speculative fetches through an ``EntityFetcher``.

    The scheduler keeps a set of node ids whose leaves are being
    prefetched so repeated hover events do not pile up work, and holds a
    reference to every background task until it finishes.
    """

    def __init__(self, fetcher: EntityFetcher, config: Optional[PrefetchConfig] = None):
        self.fetcher = fetcher
        self.config = config or PrefetchConfig()
        self._leaf_prefetches: Set[str] = set()
        self._tasks: Set[asyncio.Task] = set()

        # Statistics
        self.scheduled = 0
        self.failed = 0

    # Triggers

    def prefetch_leaves(self, go_id: str) -> None:
        """Warm the leaf cache for a hovered or focused node."""
        if not self.config.enabled:
            return
        if self.fetcher.is_cached(EntityKind.LEAVES, go_id) or go_id in self._leaf_prefetches:
            return
        self._leaf_prefetches.add(go_id)
        self._spawn(self._prefetch_leaves(go_id))

    def after_expansion(self, children: Iterable[Optional[OntologyNode]]) -> None:
        """Read ahead one level below a freshly expanded, narrow node."""
        ids = _ids(children)
        if not self.config.enabled or not ids or len(ids) > self.config.readahead_max_children:
            return
        self._spawn(self._prefetch_children(ids, self.config.readahead_delay))

    def after_initial_load(self, roots: Iterable[Optional[OntologyNode]]) -> None:
        """Preload the first level below every root."""
        ids = _ids(roots)
        if not self.config.enabled or not ids:
            return
        self._spawn(self._prefetch_children(ids, self.config.root_preload_delay))

    def is_prefetching_leaves(self, go_id: str) -> bool:
        return go_id in self._leaf_prefetches

    @property
    def pending_count(self) -> int:
        return len(self._tasks)

    # Lifecycle

    async def drain(self) -> None:
        """Wait until all scheduled background work has settled."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        """Cancel delayed triggers that have not fired yet.

        Requests already dispatched keep running (they are shielded) and
        still populate the cache.
        """
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._leaf_prefetches.clear()

    # Internals

    def _spawn(self, coro: Coroutine) -> None:
        self.scheduled += 1
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._finished)

    def _finished(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            self.failed += 1
            logger.debug("Prefetch dropped: %r", error)

    async def _prefetch_leaves(self, go_id: str) -> None:
        try:
            leaves = await self.fetcher.fetch_leaves(go_id)
            logger.debug("Prefetched %d leaves for %s", len(leaves), go_id)
        finally:
            self._leaf_prefetches.discard(go_id)

    async def _prefetch_children(self, go_ids: List[str], delay: float) -> None:
        await asyncio.sleep(delay)
        logger.debug("Reading ahead children of %s", go_ids)
        await asyncio.gather(*(self.fetcher.fetch_children(go_id) for go_id in go_ids))


def _ids(nodes: Iterable[Optional[OntologyNode]]) -> List[str]:
    return [node.go_id for node in nodes if node is not None]
