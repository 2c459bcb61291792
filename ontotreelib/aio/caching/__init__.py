"""
Caching layer for OntoTreeLib.

Time-expiring per-kind caches and in-flight request deduplication, the
two mechanisms that keep the interactive path off the network.
"""

from ._cache_store import ExpiringCache, CacheStore
from .dedup import RequestDeduplicator, request_key

__all__ = [
    'ExpiringCache',
    'CacheStore',
    'RequestDeduplicator',
    'request_key',
]
