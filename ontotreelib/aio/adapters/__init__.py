"""Async sources for remote hierarchies.

This module contains sources that bridge specific backends to the
generic read interface consumed by the fetchers.
"""

from .http import HttpHierarchySource

__all__ = [
    'HttpHierarchySource',
]
