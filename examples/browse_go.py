#!/usr/bin/env python3
"""
Console walk through a GO term hierarchy with OntoTreeLib.

This example demonstrates:
- Loading the three GO roots concurrently
- Expanding a term and reading ahead below it
- Hover prefetch followed by an instant leaf lookup
- Bounded rendering of a long strain list

Usage:
    python examples/browse_go.py [API_URL]
"""

import asyncio
import logging
import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from ontotreelib.aio import HierarchyBrowser
from ontotreelib.config import BrowserConfig
from ontotreelib.rendering import Presenter


class ConsolePresenter(Presenter):
    """Prints tree and strain updates to stdout."""

    def __init__(self, config: BrowserConfig):
        self.config = config

    def present(self, view):
        marker = "-" if view.state.is_expanded else "+"
        print(f"{'  ' * view.depth}{marker} {view.label} ({view.node.go_id})")

    def present_leaves(self, page):
        if page.is_empty:
            print("  No strains linked to this term.")
            return
        for leaf in page.items:
            print(f"  {leaf.leaf_id}  {leaf.catalog_url(self.config.leaf_catalog_url)}")
        if page.has_more:
            print(f"  {page.more_label}")

    def present_error(self, kind, view=None):
        print(f"  [error] {kind.value}")

    def present_loading(self, view):
        print(f"  Loading strains for {view.label}...")


async def main():
    """Browse the first root two levels deep and list its strains."""
    config = BrowserConfig.from_env()
    if len(sys.argv) > 1:
        config.base_url = sys.argv[1]

    async with HierarchyBrowser(config, presenter=ConsolePresenter(config)) as browser:
        roots = await browser.start()
        if not roots:
            return

        root = roots[0]
        await browser.toggle(root)
        for child in root.children:
            browser.hover(child)

        if root.children:
            print(f"\nStrains for {root.children[0].node.display_name}:")
            page = await browser.select(root.children[0])
            if page.has_more:
                browser.load_more()

        print("\nSession stats:")
        for kind, stats in browser.get_stats()['cache'].items():
            print(f"  {kind}: {stats['entries']} entries, {stats['hits']} hits, {stats['misses']} misses")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    asyncio.run(main())
