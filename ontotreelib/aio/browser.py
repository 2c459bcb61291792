"""
Lazily expanded tree browsing session.

``HierarchyBrowser`` wires the fetchers, caches and prefetch scheduler of
one session together and turns UI events (expand, select, hover) into
fetches and presenter calls. The hierarchy is a DAG; the browser renders
a spanning tree by creating one ``TreeNodeInstance`` per path through
which a node is reached, each with its own expansion state.
"""

import asyncio
import logging
import time
from typing import Callable, List, Optional

from ..config import BrowserConfig, EntityKind, ErrorKind
from ..rendering import BoundedLeafList, LeafPage, NodeState, NodeView, NullPresenter, Presenter
from .adapters.http import HttpHierarchySource
from .caching import CacheStore, RequestDeduplicator
from .core.adapter import HierarchySource
from .core.node import OntologyNode
from .error_policies import ErrorPolicy
from .fetcher import EntityFetcher
from .prefetch import PrefetchScheduler

logger = logging.getLogger(__name__)


class TreeNodeInstance:
    """One occurrence of a node in the rendered tree."""

    def __init__(self, node: OntologyNode, parent: Optional['TreeNodeInstance'] = None):
        self.node = node
        self.parent = parent
        self.path = (parent.path if parent else ()) + (node.go_id,)
        self.state = NodeState.COLLAPSED_UNLOADED
        self.children: List['TreeNodeInstance'] = []

    @property
    def go_id(self) -> str:
        return self.node.go_id

    @property
    def depth(self) -> int:
        return len(self.path) - 1

    def view(self) -> NodeView:
        return NodeView(
            node=self.node,
            path=self.path,
            state=self.state,
            children=tuple(child.node for child in self.children),
        )

    def __repr__(self) -> str:
        return f"TreeNodeInstance({'/'.join(self.path)}, {self.state.value})"


class HierarchyBrowser:
    """
    Session object behind a lazily expanded hierarchy viewer.

    Example:
        async with HierarchyBrowser(BrowserConfig(base_url=url), presenter=ui) as browser:
            roots = await browser.start()
            await browser.toggle(roots[0])
            browser.hover(roots[0].children[0])
            page = await browser.select(roots[0].children[0])
            if page.has_more:
                browser.load_more()
    """

    def __init__(
        self,
        config: Optional[BrowserConfig] = None,
        source: Optional[HierarchySource] = None,
        presenter: Optional[Presenter] = None,
        error_policy: Optional[ErrorPolicy] = None,
        timer: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the session.

        Args:
            config: Session configuration (defaults to BrowserConfig())
            source: Remote source (an HTTP source for config.base_url if omitted)
            presenter: UI collaborator (a NullPresenter if omitted)
            error_policy: How fetch faults are recorded
            timer: Clock used by the caches
        """
        self.config = config or BrowserConfig()
        errors = self.config.validate()
        if errors:
            raise ValueError("Invalid browser config: " + "; ".join(errors))

        self._owns_source = source is None
        self.source = source or HttpHierarchySource(
            self.config.base_url, timeout=self.config.request_timeout)
        self.cache_store = CacheStore(self.config.cache, timer=timer)
        self.fetcher = EntityFetcher(self.source, self.cache_store,
                                     RequestDeduplicator(), error_policy)
        self.prefetcher = PrefetchScheduler(self.fetcher, self.config.prefetch)
        self.presenter = presenter or NullPresenter()

        self.roots: List[TreeNodeInstance] = []
        self.selected: Optional[TreeNodeInstance] = None
        self._leaf_list: Optional[BoundedLeafList] = None

    async def start(self, sweep: bool = True) -> List[TreeNodeInstance]:
        """
        Load the root set concurrently and present it.

        Args:
            sweep: Start the background cache sweeper

        Returns:
            Root instances for every root that could be fetched
        """
        if sweep:
            self.cache_store.start_sweeper()

        nodes = await self.fetcher.fetch_nodes(self.config.root_ids)
        self.roots = []
        for go_id, node in zip(self.config.root_ids, nodes):
            if node is None:
                logger.info("Root %s unavailable", go_id)
                continue
            self.roots.append(TreeNodeInstance(node))

        if not self.roots:
            self.presenter.present_error(ErrorKind.ROOTS_FAILED)
            return self.roots

        for root in self.roots:
            self.presenter.present(root.view())
        self.prefetcher.after_initial_load(nodes)
        return self.roots

    async def toggle(self, instance: TreeNodeInstance) -> NodeState:
        """
        Expand or collapse one instance.

        The first expansion loads children; later toggles only flip
        visibility and never discard what was loaded. Toggles arriving
        while children are loading are ignored.
        """
        state = instance.state
        if state is NodeState.EXPANDED_LOADING:
            return state
        if state is NodeState.EXPANDED_LOADED:
            return self._set_state(instance, NodeState.COLLAPSED_LOADED)
        if state is NodeState.COLLAPSED_LOADED:
            return self._set_state(instance, NodeState.EXPANDED_LOADED)

        self._set_state(instance, NodeState.EXPANDED_LOADING)
        try:
            child_nodes = await self.fetcher.fetch_child_nodes(instance.go_id)
            instance.children = [TreeNodeInstance(child, parent=instance) for child in child_nodes]
        except Exception:
            logger.exception("Error loading children of %s", instance.go_id)
            instance.state = NodeState.COLLAPSED_UNLOADED
            self.presenter.present_error(ErrorKind.CHILDREN_FAILED, instance.view())
            return instance.state

        self._set_state(instance, NodeState.EXPANDED_LOADED)
        for child in instance.children:
            self.presenter.present(child.view())
        self.prefetcher.after_expansion(child_nodes)
        return instance.state

    async def select(self, instance: TreeNodeInstance) -> LeafPage:
        """Fetch the leaves of a node and present the first bounded page."""
        self.selected = instance
        if not self.fetcher.is_cached(EntityKind.LEAVES, instance.go_id):
            self.presenter.present_loading(instance.view())
        leaves = await self.fetcher.fetch_leaves(instance.go_id)
        bounded = BoundedLeafList(leaves, self.config.initial_leaf_count, node=instance.node)
        page = bounded.first_page()
        # A later selection may have superseded this one while we waited
        if self.selected is instance:
            self._leaf_list = bounded
            self.presenter.present_leaves(page)
        return page

    async def activate(self, instance: TreeNodeInstance) -> NodeState:
        """Click behavior: show the node's leaves and toggle it."""
        _, state = await asyncio.gather(self.select(instance), self.toggle(instance))
        return state

    def load_more(self) -> Optional[LeafPage]:
        """Present the deferred remainder of the current leaf list."""
        if self._leaf_list is None or not self._leaf_list.has_more:
            return None
        page = self._leaf_list.load_more()
        self.presenter.present_leaves(page)
        return page

    def hover(self, instance: TreeNodeInstance) -> None:
        """Hover/focus trigger: prefetch leaves without blocking."""
        self.prefetcher.prefetch_leaves(instance.go_id)

    def _set_state(self, instance: TreeNodeInstance, state: NodeState) -> NodeState:
        instance.state = state
        self.presenter.present(instance.view())
        return state

    def get_stats(self) -> dict:
        stats = self.fetcher.get_stats()
        stats['prefetch'] = {
            'scheduled': self.prefetcher.scheduled,
            'failed': self.prefetcher.failed,
            'pending': self.prefetcher.pending_count,
        }
        return stats

    async def close(self) -> None:
        await self.prefetcher.close()
        await self.cache_store.stop_sweeper()
        if self._owns_source:
            await self.source.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
