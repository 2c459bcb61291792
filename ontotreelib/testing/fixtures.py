"""Test fixtures for OntoTreeLib consumers.

These fixtures provide an in-memory hierarchy, a controllable clock and a
recording presenter so UIs built on OntoTreeLib can be tested without a
backend.
"""

import asyncio
from collections import Counter
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ..aio.core.adapter import HierarchySource
from ..aio.error_policies import NotFoundError, TransportError
from ..config import EntityKind, ErrorKind
from ..rendering import LeafPage, NodeView, Presenter


class ManualClock:
    """Clock that only moves when told to. Pass as ``timer=``."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


class TickingClock:
    """Clock that moves forward by ``step`` on every reading.

    Exposes reads that straddle an expiry instant.
    """

    def __init__(self, start: float = 0.0, step: float = 1.0):
        self.now = start
        self.step = step

    def __call__(self) -> float:
        self.now += self.step
        return self.now


class FakeHierarchySource(HierarchySource):
    """
    In-memory hierarchy with per-read latency and injectable faults.

    Example:
        source = FakeHierarchySource(
            terms={"GO:1": "root", "GO:2": "child"},
            children={"GO:1": ["GO:2"]},
            leaves={"GO:2": ["MMRRC:000001"]},
        )
    """

    def __init__(
        self,
        terms: Optional[Mapping[str, str]] = None,
        children: Optional[Mapping[str, Iterable[str]]] = None,
        leaves: Optional[Mapping[str, Iterable[str]]] = None,
        latency: float = 0.0,
    ):
        super().__init__()
        self.terms: Dict[str, str] = dict(terms or {})
        self.children: Dict[str, List[str]] = {k: list(v) for k, v in (children or {}).items()}
        self.leaves: Dict[str, List[str]] = {k: list(v) for k, v in (leaves or {}).items()}
        self.latency = latency
        self.latencies: Dict[Tuple[EntityKind, str], float] = {}
        self.failures: Dict[Tuple[EntityKind, str], Exception] = {}
        self.payloads: Dict[Tuple[EntityKind, str], Any] = {}
        self.calls: Counter = Counter()

    def set_latency(self, kind: EntityKind, ident: str, seconds: float) -> None:
        self.latencies[(kind, ident)] = seconds

    def fail(self, kind: EntityKind, ident: str, error: Optional[Exception] = None) -> None:
        """Make reads of ``(kind, ident)`` raise until ``heal()`` is called."""
        self.failures[(kind, ident)] = error or TransportError(f"simulated failure for {ident}")

    def heal(self, kind: EntityKind, ident: str) -> None:
        self.failures.pop((kind, ident), None)

    def override_payload(self, kind: EntityKind, ident: str, payload: Any) -> None:
        """Return ``payload`` verbatim for ``(kind, ident)``."""
        self.payloads[(kind, ident)] = payload

    def call_count(self, kind: EntityKind, ident: str) -> int:
        return self.calls[(kind, ident)]

    async def read(self, kind: EntityKind, ident: str) -> Any:
        self.read_count += 1
        self.calls[(kind, ident)] += 1
        await asyncio.sleep(self.latencies.get((kind, ident), self.latency))

        if (kind, ident) in self.failures:
            raise self.failures[(kind, ident)]
        if (kind, ident) in self.payloads:
            return self.payloads[(kind, ident)]

        if kind is EntityKind.NODE:
            if ident not in self.terms:
                raise NotFoundError(kind, ident)
            return {"go_id": ident, "name": self.terms[ident]}
        if kind is EntityKind.CHILDREN:
            return [{"child_go_id": child} for child in self.children.get(ident, [])]
        return [{"mmrrc_id": leaf} for leaf in self.leaves.get(ident, [])]


class RecordingPresenter(Presenter):
    """Presenter that records every call for later assertions."""

    def __init__(self):
        self.views: List[NodeView] = []
        self.pages: List[LeafPage] = []
        self.errors: List[Tuple[ErrorKind, Optional[NodeView]]] = []
        self.loading: List[NodeView] = []

    def present(self, view: NodeView) -> None:
        self.views.append(view)

    def present_leaves(self, page: LeafPage) -> None:
        self.pages.append(page)

    def present_error(self, kind: ErrorKind, view: Optional[NodeView] = None) -> None:
        self.errors.append((kind, view))

    def present_loading(self, view: NodeView) -> None:
        self.loading.append(view)

    def last_view_of(self, go_id: str) -> Optional[NodeView]:
        for view in reversed(self.views):
            if view.node.go_id == go_id:
                return view
        return None

    def rendered_leaf_ids(self) -> List[str]:
        """Leaf ids currently on screen, applying replace/append semantics."""
        shown: List[str] = []
        for page in self.pages:
            if page.offset == 0:
                shown = []
            shown.extend(leaf.leaf_id for leaf in page.items)
        return shown

    def load_more_visible(self) -> bool:
        return bool(self.pages) and self.pages[-1].has_more


class CacheTestHelper:
    """Stable view of a CacheStore's contents for assertions.

    Example:
        helper = CacheTestHelper(browser.cache_store)
        assert helper.is_cached(EntityKind.NODE, "GO:0008150")
    """

    def __init__(self, cache_store):
        self._store = cache_store

    def is_cached(self, kind: EntityKind, ident: str) -> bool:
        return ident in self._store.namespace(kind)

    def get_summary(self) -> Dict[str, Any]:
        stats = self._store.get_stats()
        return {
            'entries': {name: s['entries'] for name, s in stats.items()},
            'hits': sum(s['hits'] for s in stats.values()),
            'misses': sum(s['misses'] for s in stats.values()),
        }
