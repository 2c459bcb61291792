"""
Tests for the bounded leaf renderer and presentation types.
"""

import pytest

from ontotreelib.aio.core import LeafRecord, OntologyNode
from ontotreelib.config import BrowserConfig
from ontotreelib.rendering import BoundedLeafList, LeafPage, NodeState, NodeView


def leaves(count):
    return [LeafRecord(f"MMRRC:{i:06d}") for i in range(count)]


class TestBoundedLeafList:
    """Initial prefix plus a single deferred remainder."""

    def test_large_list_shows_prefix_and_load_more(self):
        bounded = BoundedLeafList(leaves(150))

        page = bounded.first_page()

        assert len(page.items) == 100
        assert page.has_more
        assert page.remaining == 50
        assert page.more_label == "+ 50 more strains (click to load)"

    def test_load_more_renders_remainder_and_removes_control(self):
        all_leaves = leaves(150)
        bounded = BoundedLeafList(all_leaves)
        first = bounded.first_page()

        rest = bounded.load_more()

        assert len(rest.items) == 50
        assert rest.offset == 100
        assert not rest.has_more
        assert not bounded.has_more
        assert list(first.items) + list(rest.items) == all_leaves

    def test_small_list_has_no_control(self):
        page = BoundedLeafList(leaves(50)).first_page()
        assert len(page.items) == 50
        assert not page.has_more

    def test_exactly_initial_count_has_no_control(self):
        page = BoundedLeafList(leaves(100)).first_page()
        assert len(page.items) == 100
        assert not page.has_more

    def test_empty_list(self):
        page = BoundedLeafList([]).first_page()
        assert page.is_empty
        assert not page.has_more

    def test_load_more_when_nothing_deferred(self):
        bounded = BoundedLeafList(leaves(3))
        bounded.first_page()
        extra = bounded.load_more()
        assert extra.items == ()
        assert not extra.is_empty  # An append, not an empty list state

    def test_custom_initial_count(self):
        bounded = BoundedLeafList(leaves(10), initial_count=4)
        assert len(bounded.first_page().items) == 4
        assert bounded.rendered == 4
        assert bounded.total == 10

    def test_default_initial_count_follows_config(self):
        assert BoundedLeafList([]).initial_count == BrowserConfig().initial_leaf_count

    def test_invalid_initial_count(self):
        with pytest.raises(ValueError):
            BoundedLeafList(leaves(1), initial_count=0)

    def test_source_list_is_not_mutated(self):
        original = leaves(120)
        snapshot = list(original)
        bounded = BoundedLeafList(original)
        bounded.first_page()
        bounded.load_more()
        assert original == snapshot


class TestNodeViews:
    """State helpers and node views."""

    def test_state_flags(self):
        assert not NodeState.COLLAPSED_UNLOADED.is_expanded
        assert not NodeState.COLLAPSED_UNLOADED.is_loaded
        assert NodeState.EXPANDED_LOADING.is_expanded
        assert not NodeState.EXPANDED_LOADING.is_loaded
        assert NodeState.EXPANDED_LOADED.is_expanded
        assert NodeState.COLLAPSED_LOADED.is_loaded

    def test_view_label_falls_back_to_id(self):
        view = NodeView(node=OntologyNode(go_id="GO:1"), path=("GO:0", "GO:1"),
                        state=NodeState.COLLAPSED_UNLOADED)
        assert view.label == "GO:1"
        assert view.depth == 1

    def test_page_defaults(self):
        page = LeafPage(node=None, items=())
        assert page.is_empty
        assert page.offset == 0
