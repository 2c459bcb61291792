"""Async hierarchy source abstraction.

Defines how different backends are adapted into the read-only interface
the fetchers consume. A source performs raw reads only: no caching, no
deduplication, no fallbacks.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Set

from ...config import EntityKind


class HierarchySource(ABC):
    """Abstract base class for remote hierarchy sources.

    Sources bridge between the generic fetch logic and a specific
    backend. Every read is idempotent and keyed by an opaque identifier.
    """

    def __init__(self, max_concurrent: int = 100):
        """Initialize source with concurrency control.

        Args:
            max_concurrent: Maximum concurrent remote reads
        """
        self.max_concurrent = max_concurrent
        self.semaphore = asyncio.Semaphore(max_concurrent)
        self.read_count = 0

    @abstractmethod
    async def read(self, kind: EntityKind, ident: str) -> Any:
        """Read the raw JSON payload for one entity.

        Args:
            kind: Which entity kind to read
            ident: Identifier of the node the read is about

        Returns:
            Decoded JSON payload

        Raises:
            NotFoundError: The backend reports the entity as absent
            TransportError: Network, status or decoding failure
        """
        pass

    def supports_capability(self, capability: str) -> bool:
        return capability in self._define_capabilities()

    def _define_capabilities(self) -> Set[str]:
        """Define source capabilities.

        Override in subclasses to declare supported features.
        """
        return {kind.key_prefix for kind in EntityKind}

    async def get_stats(self) -> dict:
        return {
            'max_concurrent': self.max_concurrent,
            'read_count': self.read_count,
        }

    async def close(self):
        """Clean up source resources.

        Override if the source holds connections.
        """
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
