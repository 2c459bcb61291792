"""
Entity fetchers: cache + dedup + remote read.

Every fetch follows the same algorithm, parameterized by entity kind:

1. Return the cached value on a fresh hit (no network, no dedup bookkeeping).
2. On a miss, join or start the single in-flight request for the key.
3. Parse the payload and populate the cache before the request resolves.
4. Resolve to the kind's fallback on any fault (``None`` for nodes, ``[]``
   for lists). Fallbacks are never cached.

Nothing above this boundary ever needs to catch a fetch-related fault.
"""

import asyncio
import functools
import logging
from typing import Any, Iterable, List, Optional

from ..config import EntityKind
from .caching import CacheStore, RequestDeduplicator, request_key
from .core.adapter import HierarchySource
from .core.node import ChildEdge, LeafRecord, OntologyNode
from .error_policies import ErrorPolicy, LoggingErrorPolicy, NotFoundError

logger = logging.getLogger(__name__)

_MISSING = object()


class EntityFetcher:
    """
    Fetches nodes, child edges and leaves for the tree viewer.

    Example:
        fetcher = EntityFetcher(HttpHierarchySource(url), CacheStore())
        term = await fetcher.fetch_node("GO:0008150")
        children = await fetcher.fetch_child_nodes("GO:0008150")
    """

    def __init__(
        self,
        source: HierarchySource,
        cache_store: Optional[CacheStore] = None,
        deduplicator: Optional[RequestDeduplicator] = None,
        error_policy: Optional[ErrorPolicy] = None,
    ):
        """
        Initialize the fetcher.

        Args:
            source: Remote-call primitive
            cache_store: Session cache (a fresh one if omitted)
            deduplicator: In-flight tracker (a fresh one if omitted)
            error_policy: How faults are recorded (defaults to logging)
        """
        self.source = source
        self.cache_store = cache_store or CacheStore()
        self.deduplicator = deduplicator or RequestDeduplicator()
        self.error_policy = error_policy or LoggingErrorPolicy()

    async def fetch_node(self, go_id: str) -> Optional[OntologyNode]:
        """Fetch one node, or ``None`` if it does not exist or cannot be read."""
        return await self._fetch(EntityKind.NODE, go_id)

    async def fetch_children(self, go_id: str) -> List[ChildEdge]:
        """Fetch the child edges of a node (``[]`` on failure)."""
        return await self._fetch(EntityKind.CHILDREN, go_id)

    async def fetch_leaves(self, go_id: str) -> List[LeafRecord]:
        """Fetch the leaf records annotated to a node (``[]`` on failure)."""
        return await self._fetch(EntityKind.LEAVES, go_id)

    async def fetch_nodes(self, go_ids: Iterable[str]) -> List[Optional[OntologyNode]]:
        """Fetch several nodes concurrently, preserving order."""
        return list(await asyncio.gather(*(self.fetch_node(go_id) for go_id in go_ids)))

    async def fetch_child_nodes(self, go_id: str) -> List[OntologyNode]:
        """
        Fetch the child edges of a node, then every child node concurrently.

        Latency is bounded by the slowest child, not the sum. Children that
        cannot be resolved are dropped; order follows the edge list.
        """
        edges = await self.fetch_children(go_id)
        nodes = await self.fetch_nodes(edge.child_id for edge in edges)
        return [node for node in nodes if node is not None]

    def is_cached(self, kind: EntityKind, ident: str) -> bool:
        return ident in self.cache_store.namespace(kind)

    async def _fetch(self, kind: EntityKind, ident: str) -> Any:
        cached = self.cache_store.namespace(kind).get(ident, _MISSING)
        if cached is not _MISSING:
            return cached

        future = self.deduplicator.dedupe(
            request_key(kind, ident),
            functools.partial(self._load, kind, ident),
        )
        # Shielded so a caller that goes away never cancels a shared request
        return await asyncio.shield(future)

    async def _load(self, kind: EntityKind, ident: str) -> Any:
        try:
            payload = await self.source.read(kind, ident)
            value = self._parse(kind, ident, payload)
        except NotFoundError:
            logger.debug("%s %r not found", kind.key_prefix, ident)
            return kind.fallback()
        except Exception as e:
            return self.error_policy.handle(e, kind, ident)

        self.cache_store.namespace(kind).set(ident, value)
        return value

    @staticmethod
    def _parse(kind: EntityKind, ident: str, payload: Any) -> Any:
        if kind is EntityKind.NODE:
            return OntologyNode.from_payload(payload)
        if kind is EntityKind.CHILDREN:
            return ChildEdge.list_from_payload(ident, payload)
        return LeafRecord.list_from_payload(payload)

    def get_stats(self) -> dict:
        return {
            'cache': self.cache_store.get_stats(),
            'requests': self.deduplicator.get_stats(),
        }
