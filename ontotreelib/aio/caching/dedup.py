"""
In-flight request deduplication.

Concurrent callers asking for the same key share one pending future
instead of issuing duplicate remote calls.
"""

import asyncio
import functools
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from ...config import EntityKind

logger = logging.getLogger(__name__)


def request_key(kind: EntityKind, ident: str) -> str:
    """Build the dedup key ``"<kind>-<id>"`` so scopes never cross kinds."""
    return f"{kind.key_prefix}-{ident}"


class RequestDeduplicator:
    """
    Tracks in-flight fetches keyed by request key.

    ``dedupe()`` is a plain (non-async) method: the check for a pending
    request and the registration of a new one happen before the caller
    first suspends, so two tasks asking for the same key can never both
    start a fetch. A threaded port would need a lock around that step.

    The pending entry is removed inside the fetch task itself, before its
    result becomes visible to any waiter, so a call made after a failure
    starts a fresh attempt.
    """

    def __init__(self):
        self._in_flight: Dict[str, asyncio.Future] = {}

        # Statistics
        self.started = 0
        self.concurrent_waits = 0

    def dedupe(self, key: str, producer: Callable[[], Awaitable[Any]]) -> asyncio.Future:
        """
        Return the pending future for ``key``, starting one if needed.

        Args:
            key: Request key (see ``request_key``)
            producer: Zero-argument callable returning an awaitable

        Returns:
            Future shared by every caller of this key until it settles
        """
        pending = self._in_flight.get(key)
        if pending is not None:
            self.concurrent_waits += 1
            logger.debug("Joining in-flight request %s", key)
            return pending

        self.started += 1
        future = asyncio.ensure_future(self._run(key, producer))
        self._in_flight[key] = future
        # Covers a task cancelled before its first step
        future.add_done_callback(functools.partial(self._discard, key))
        return future

    async def _run(self, key: str, producer: Callable[[], Awaitable[Any]]) -> Any:
        try:
            return await producer()
        finally:
            if self._in_flight.get(key) is asyncio.current_task():
                del self._in_flight[key]

    def _discard(self, key: str, future: asyncio.Future) -> None:
        if self._in_flight.get(key) is future:
            del self._in_flight[key]

    def in_flight(self, key: str) -> Optional[asyncio.Future]:
        return self._in_flight.get(key)

    @property
    def pending_count(self) -> int:
        return len(self._in_flight)

    def get_stats(self) -> dict:
        return {
            'started': self.started,
            'concurrent_waits': self.concurrent_waits,
            'pending': len(self._in_flight),
        }
