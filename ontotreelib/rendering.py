"""Presentation contract for OntoTreeLib.

The data-access core never touches presentation state. It hands plain
view objects to a ``Presenter`` implemented by the UI, and caps the work
done on the interactive path for very large leaf lists with
``BoundedLeafList``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

from .aio.core.node import LeafRecord, OntologyNode
from .config import DEFAULT_INITIAL_LEAF_COUNT, ErrorKind


class NodeState(Enum):
    """Per-instance expansion state of a tree node.

    collapsed(unloaded) -> expanded(loading) -> expanded(loaded)
    expanded(loaded) <-> collapsed(loaded)
    """
    COLLAPSED_UNLOADED = "collapsed_unloaded"
    EXPANDED_LOADING = "expanded_loading"
    EXPANDED_LOADED = "expanded_loaded"
    COLLAPSED_LOADED = "collapsed_loaded"

    @property
    def is_expanded(self) -> bool:
        return self in (NodeState.EXPANDED_LOADING, NodeState.EXPANDED_LOADED)

    @property
    def is_loaded(self) -> bool:
        return self in (NodeState.EXPANDED_LOADED, NodeState.COLLAPSED_LOADED)


@dataclass(frozen=True)
class NodeView:
    """Snapshot of one tree node instance handed to the presenter."""
    node: OntologyNode
    path: Tuple[str, ...]           # Ids from the root down to this node
    state: NodeState
    children: Tuple[OntologyNode, ...] = ()

    @property
    def depth(self) -> int:
        return len(self.path) - 1

    @property
    def label(self) -> str:
        return self.node.display_name


@dataclass(frozen=True)
class LeafPage:
    """A batch of leaves to render, plus how many are still deferred."""
    node: Optional[OntologyNode]
    items: Tuple[LeafRecord, ...]
    remaining: int = 0
    offset: int = 0

    @property
    def has_more(self) -> bool:
        """Whether a single "load more" affordance should be shown."""
        return self.remaining > 0

    @property
    def is_empty(self) -> bool:
        return self.offset == 0 and not self.items

    @property
    def more_label(self) -> str:
        return f"+ {self.remaining} more strains (click to load)"


class BoundedLeafList:
    """
    Renders an initial bounded prefix of a leaf list and defers the rest.

    Works purely over an already-fetched list; it never fetches.

    Example:
        bounded = BoundedLeafList(leaves)        # 150 leaves
        page = bounded.first_page()              # 100 items, remaining=50
        rest = bounded.load_more()               # 50 items, remaining=0
    """

    def __init__(self, leaves: Sequence[LeafRecord],
                 initial_count: int = DEFAULT_INITIAL_LEAF_COUNT,
                 node: Optional[OntologyNode] = None):
        if initial_count <= 0:
            raise ValueError("initial_count must be positive")
        self._leaves = tuple(leaves)
        self.initial_count = initial_count
        self.node = node
        self._rendered = 0

    @property
    def total(self) -> int:
        return len(self._leaves)

    @property
    def rendered(self) -> int:
        return self._rendered

    @property
    def has_more(self) -> bool:
        return self._rendered < len(self._leaves)

    def first_page(self) -> LeafPage:
        """Render the first ``initial_count`` leaves (resets any progress)."""
        shown = self._leaves[:self.initial_count]
        self._rendered = len(shown)
        return LeafPage(self.node, shown, remaining=len(self._leaves) - self._rendered)

    def load_more(self) -> LeafPage:
        """Render everything still deferred in one batch."""
        offset = self._rendered
        rest = self._leaves[offset:]
        self._rendered = len(self._leaves)
        return LeafPage(self.node, rest, remaining=0, offset=offset)


class Presenter(ABC):
    """Narrow interface implemented by the UI collaborator."""

    @abstractmethod
    def present(self, view: NodeView) -> None:
        """Show or refresh one tree node instance."""

    @abstractmethod
    def present_leaves(self, page: LeafPage) -> None:
        """Show a batch of leaves for the selected node.

        ``page.offset == 0`` replaces the current list; otherwise the items
        are appended and the "load more" affordance removed.
        """

    @abstractmethod
    def present_error(self, kind: ErrorKind, view: Optional[NodeView] = None) -> None:
        """Show a user-visible failure state."""

    def present_loading(self, view: NodeView) -> None:
        """Show that leaves for ``view`` are being fetched.

        Only called when the leaves are not cached. The next
        ``present_leaves`` for the same node replaces this state.
        """


class NullPresenter(Presenter):
    """Presenter that discards everything (headless use)."""

    def present(self, view: NodeView) -> None:
        pass

    def present_leaves(self, page: LeafPage) -> None:
        pass

    def present_error(self, kind: ErrorKind, view: Optional[NodeView] = None) -> None:
        pass
