"""Asynchronous data-access layer of OntoTreeLib.

Native async/await fetchers with per-kind expiring caches, in-flight
request deduplication and predictive prefetching, plus the session
object that drives a lazily expanded tree viewer.
"""

# Core abstractions
from .core import (
    OntologyNode,
    ChildEdge,
    LeafRecord,
    HierarchySource,
)

# Sources
from .adapters import HttpHierarchySource

# Caching
from .caching import ExpiringCache, CacheStore, RequestDeduplicator, request_key

# Errors
from .error_policies import (
    OntoTreeError,
    NotFoundError,
    TransportError,
    ErrorPolicy,
    LoggingErrorPolicy,
    CollectErrorsPolicy,
    ThresholdPolicy,
)

# Fetching and prefetching
from .fetcher import EntityFetcher
from .prefetch import PrefetchScheduler

# Session
from .browser import HierarchyBrowser, TreeNodeInstance

__all__ = [
    # Core abstractions
    'OntologyNode',
    'ChildEdge',
    'LeafRecord',
    'HierarchySource',
    # Sources
    'HttpHierarchySource',
    # Caching
    'ExpiringCache',
    'CacheStore',
    'RequestDeduplicator',
    'request_key',
    # Errors
    'OntoTreeError',
    'NotFoundError',
    'TransportError',
    'ErrorPolicy',
    'LoggingErrorPolicy',
    'CollectErrorsPolicy',
    'ThresholdPolicy',
    # Fetching
    'EntityFetcher',
    'PrefetchScheduler',
    # Session
    'HierarchyBrowser',
    'TreeNodeInstance',
]
