"""OntoTreeLib - Data access for lazily expanded ontology browsers.

OntoTreeLib fetches nodes, child lists and leaf annotations from a remote
read-only hierarchy API (Gene Ontology terms and MMRRC strains by
default), caches them with time-based expiry, deduplicates concurrent
requests and reads ahead of the user without blocking the UI.

    from ontotreelib.aio import HierarchyBrowser
    from ontotreelib.config import BrowserConfig
"""

__version__ = "0.1.0"

from . import aio
from .config import BrowserConfig, CacheConfig, PrefetchConfig, EntityKind, ErrorKind

__all__ = [
    "__version__",
    "aio",
    "BrowserConfig",
    "CacheConfig",
    "PrefetchConfig",
    "EntityKind",
    "ErrorKind",
]
