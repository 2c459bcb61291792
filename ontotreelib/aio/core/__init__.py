"""Core abstractions for the async data-access layer.

This module defines the hierarchy data model and the interface every
remote source implements.
"""

from .node import OntologyNode, ChildEdge, LeafRecord, PayloadError
from .adapter import HierarchySource

__all__ = [
    # Data model
    'OntologyNode',
    'ChildEdge',
    'LeafRecord',
    'PayloadError',
    # Source
    'HierarchySource',
]
